"""trifree — triangle structure analysis and far-from-triangle-free certification."""

__version__ = "0.1.0"

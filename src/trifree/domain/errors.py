"""Exception hierarchy for the domain layer.

Domain functions raise these; services translate them into
:class:`~trifree.services.result.ServiceError` codes so callers of the
service layer always receive a ServiceResult.
"""

from __future__ import annotations

from typing import Any


class TrifreeError(Exception):
    """Base class for all trifree domain errors."""

    code = "TRIFREE_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class PreconditionViolation(TrifreeError):
    """An input does not satisfy the precondition a bound relies on.

    Raised instead of returning a number that would look plausible but
    has no justification (a non-disjoint packing, an H that is not a
    triangle-free subgraph of G, ...).
    """

    code = "PRECONDITION_VIOLATION"


class InvariantViolation(TrifreeError):
    """Two computations that must agree did not."""

    code = "INVARIANT_VIOLATION"


class UndecidedFarness(TrifreeError):
    """Neither a packing nor a refuting subgraph settles far-from-triangle-free."""

    code = "UNDETERMINED"


class GraphFormatError(TrifreeError):
    """A graph or packing file could not be parsed into a simple graph."""

    code = "INVALID_GRAPH"

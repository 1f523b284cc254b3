"""Domain layer — triangle types, enumeration, and certification rules.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""

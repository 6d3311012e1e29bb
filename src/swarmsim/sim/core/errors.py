from __future__ import annotations


class SwarmError(Exception):
    pass


class InvalidStateError(SwarmError, ValueError):
    """Raised when a generation or request fails validation at the engine boundary."""


class DegenerateInputError(SwarmError, ValueError):
    """Raised when a disc cannot be built from the given points (too few, or collinear)."""

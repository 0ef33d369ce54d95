"""
Exceptions raised by the XO match engine.
"""


class XOError(Exception):
    """Base class for all engine errors."""


class InvalidMoveError(XOError, ValueError):
    """Raised when a move targets an occupied or out-of-range cell."""


class InvalidStateTransitionError(XOError, RuntimeError):
    """Raised when an operation is not allowed in the current match phase."""

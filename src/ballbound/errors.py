"""
Exceptions raised by ballbound.

Failing to prove something (a unique root, a tolerance, a bound) is an
expected outcome and is reported through indeterminate (NaN) values or
loose enclosures, never through these exceptions. They are reserved for
invalid input.
"""


class BallboundError(Exception):
    """Base class for all ballbound errors."""


class InvalidIntervalError(BallboundError, ValueError):
    """An interval with non-finite endpoints or with lo > hi."""

    def __init__(self, lo, hi, reason: str = ""):
        self.lo = lo
        self.hi = hi
        message = f"Invalid interval: [{lo}, {hi}]"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

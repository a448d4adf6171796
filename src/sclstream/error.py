"""
Error handling for sclstream.

Stream exhaustion is not an error: ``load()`` reports it by returning False.
Everything raised by the package derives from :class:`SclStreamError` and
carries an integer code, grouped by category the same way the native
error table is.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
SCLSTREAM_OK = 0

# General errors (1-9)
SCLSTREAM_ERROR_UNKNOWN = 1
SCLSTREAM_ERROR_INTERNAL = 2

# Argument errors (10-19)
SCLSTREAM_ERROR_INVALID_ARGUMENT = 10
SCLSTREAM_ERROR_DIMENSION_MISMATCH = 11
SCLSTREAM_ERROR_INDEX_OUT_OF_BOUNDS = 14

# Feature errors (40-49)
SCLSTREAM_ERROR_STATISTIC_UNAVAILABLE = 42


_ERROR_MESSAGES = {
    SCLSTREAM_OK: "Success",
    SCLSTREAM_ERROR_UNKNOWN: "Unknown error",
    SCLSTREAM_ERROR_INTERNAL: "Internal error",
    SCLSTREAM_ERROR_INVALID_ARGUMENT: "Invalid argument",
    SCLSTREAM_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    SCLSTREAM_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    SCLSTREAM_ERROR_STATISTIC_UNAVAILABLE: "Statistic unavailable",
}


# =============================================================================
# Exception Classes
# =============================================================================

class SclStreamError(Exception):
    """
    Base exception for all sclstream errors.

    Subclasses fix the code; the base class can be raised with any code.
    """

    OK = SCLSTREAM_OK
    ERROR_UNKNOWN = SCLSTREAM_ERROR_UNKNOWN
    ERROR_INTERNAL = SCLSTREAM_ERROR_INTERNAL
    ERROR_INVALID_ARGUMENT = SCLSTREAM_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = SCLSTREAM_ERROR_DIMENSION_MISMATCH
    ERROR_INDEX_OUT_OF_BOUNDS = SCLSTREAM_ERROR_INDEX_OUT_OF_BOUNDS
    ERROR_STATISTIC_UNAVAILABLE = SCLSTREAM_ERROR_STATISTIC_UNAVAILABLE

    def __init__(self, code: int, message: Optional[str] = None):
        """
        Create exception.

        Args:
            code: Error code
            message: Optional detailed message (table message if not provided)
        """
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(f"sclstream error {code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "SclStreamError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(code, msg)


class InvalidArgumentError(SclStreamError, ValueError):
    """Argument has an unusable value (non-positive chunk size, bad level)."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(SCLSTREAM_ERROR_INVALID_ARGUMENT, message)


class DimensionMismatchError(SclStreamError, ValueError):
    """Array lengths or shapes disagree."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(SCLSTREAM_ERROR_DIMENSION_MISMATCH, message)


class ParameterIndexError(SclStreamError, IndexError):
    """A parameter fit does not cover the requested slot, row or column."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(SCLSTREAM_ERROR_INDEX_OUT_OF_BOUNDS, message)


class StatisticUnavailableError(SclStreamError, LookupError):
    """
    Requested statistic was never computed by the producing pass.

    Attributes:
        statistic: Name of the missing statistic ('nonzeros', 'mean', 'variance')
        axis: 'row' or 'col'
    """

    def __init__(self, statistic: str, axis: str):
        self.statistic = statistic
        self.axis = axis
        super().__init__(
            SCLSTREAM_ERROR_STATISTIC_UNAVAILABLE,
            f"{axis} {statistic} not calculated in this StatsResult",
        )


__all__ = [
    "SCLSTREAM_OK",
    "SCLSTREAM_ERROR_UNKNOWN",
    "SCLSTREAM_ERROR_INTERNAL",
    "SCLSTREAM_ERROR_INVALID_ARGUMENT",
    "SCLSTREAM_ERROR_DIMENSION_MISMATCH",
    "SCLSTREAM_ERROR_INDEX_OUT_OF_BOUNDS",
    "SCLSTREAM_ERROR_STATISTIC_UNAVAILABLE",
    "SclStreamError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "ParameterIndexError",
    "StatisticUnavailableError",
]

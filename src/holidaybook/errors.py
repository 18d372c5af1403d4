"""
Exception types raised by holidaybook.

The core (parser, resolver, aggregator) raises these and never logs or
swallows them. Callers decide how to report them: the Lambda handler maps
them to HTTP status codes, the static generator aborts the run.
"""

from enum import Enum
from typing import Optional


class HolidayBookError(Exception):
    """Base class for all holidaybook errors."""
    pass


class ParseErrorKind(str, Enum):
    """Why a raw dataset could not be decoded."""

    MALFORMED_JSON = "MalformedJson"
    MISSING_FIELD = "MissingField"
    INVALID_ENUM_VALUE = "InvalidEnumValue"
    INVALID_DATE = "InvalidDate"


class ParseError(HolidayBookError):
    """Raised when the upstream dataset cannot be decoded."""

    def __init__(self, kind: ParseErrorKind, message: str):
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind
        self.message = message


class InvalidRangeError(HolidayBookError, ValueError):
    """Raised when a date range starts after it ends."""
    pass


class InternalInvariantViolation(HolidayBookError, RuntimeError):
    """Raised when resolved data breaks a guarantee the resolver makes."""
    pass


class UpstreamError(HolidayBookError):
    """Raised when the holiday API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(HolidayBookError):
    """Raised when settings fail validation."""
    pass

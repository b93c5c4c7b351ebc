"""Error taxonomy for flight log validation and data access.

Validation errors are raised while building a record, never during
aggregation. ``DataUnavailable`` is raised by the storage layer when a
collection cannot be supplied and is propagated unchanged.
"""

from __future__ import annotations

from typing import Any


class FlightLogError(Exception):
    """Base flightlog exception."""

    code = "FLIGHTLOG_ERROR"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidTimeFormat(FlightLogError, ValueError):
    """A time-of-day string is not H:MM / HH:MM within 00:00-23:59."""

    code = "INVALID_TIME_FORMAT"

    def __init__(self, value: Any):
        super().__init__(
            f"Invalid time {value!r}: expected HH:MM between 00:00 and 23:59",
            details={"value": value},
        )
        self.value = value


class InvalidDuration(FlightLogError, ValueError):
    """Landing time is at or before takeoff time."""

    code = "INVALID_DURATION"

    def __init__(self, takeoff: str, landing: str):
        super().__init__(
            f"Landing {landing} must be after takeoff {takeoff} on the same day",
            details={"takeoff": takeoff, "landing": landing},
        )
        self.takeoff = takeoff
        self.landing = landing


class InvalidDate(FlightLogError, ValueError):
    """A calendar date (YYYY-MM-DD) or month (YYYY-MM) string is malformed."""

    code = "INVALID_DATE"

    def __init__(self, value: Any, expected: str = "YYYY-MM-DD"):
        super().__init__(
            f"Invalid date {value!r}: expected {expected}",
            details={"value": value, "expected": expected},
        )
        self.value = value


class DataUnavailable(FlightLogError):
    """The data source failed to supply a collection."""

    code = "DATA_UNAVAILABLE"

    def __init__(self, source: str, reason: str | None = None):
        super().__init__(
            f"{source} data is currently unavailable",
            details={"source": source, "reason": reason},
        )
        self.source = source
        self.reason = reason

"""Excel-compatible CSV export of flight records.

Output is UTF-8 with a byte-order mark, CRLF row separators and quoting only
for fields that contain a comma, double quote or newline.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timezone, tzinfo

from flightlog.models import FlightRecord
from flightlog.timeconv import epoch_to_calendar_day, format_duration

CSV_HEADERS = (
    "Date",
    "Student",
    "Instructor",
    "Aircraft",
    "Type",
    "Exercise",
    "Takeoff",
    "Landing",
    "Total",
    "LandingType",
    "LandingCount",
)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"

_BOM = "\ufeff"
_ROW_SEPARATOR = "\r\n"
_NEEDS_QUOTING = (",", '"', "\n")


def escape_csv_field(value: str) -> str:
    """Quote a field if it contains a comma, quote or newline; double inner quotes."""
    if any(ch in value for ch in _NEEDS_QUOTING):
        return '"' + value.replace('"', '""') + '"'
    return value


def flight_to_row(flight: FlightRecord, tz: tzinfo = timezone.utc) -> list[str]:
    return [
        epoch_to_calendar_day(flight.date, tz),
        flight.student,
        flight.instructor,
        flight.aircraft,
        flight.flight_type.label,
        flight.exercise,
        flight.takeoff_time,
        flight.landing_time,
        format_duration(flight.duration),
        flight.landing_type.label,
        str(flight.landing_count),
    ]


def export_flights_csv(
    flights: Iterable[FlightRecord], tz: tzinfo = timezone.utc
) -> bytes:
    """Serialize flights to CSV bytes. The header row is always present."""
    rows: list[list[str]] = [list(CSV_HEADERS)]
    rows.extend(flight_to_row(f, tz) for f in flights)

    content = _ROW_SEPARATOR.join(
        ",".join(escape_csv_field(value) for value in row) for row in rows
    )
    return (_BOM + content).encode("utf-8")


def default_export_filename(today: date) -> str:
    """flight-log-YYYY-MM-DD.csv"""
    return f"flight-log-{today.isoformat()}.csv"

"""Month / student / aircraft filtering of flight records."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timezone, tzinfo

from flightlog.models import FlightFilter, FlightRecord
from flightlog.timeconv import epoch_to_calendar_month


def flight_matches(
    flight: FlightRecord, flight_filter: FlightFilter, tz: tzinfo = timezone.utc
) -> bool:
    """True when the flight passes every non-empty filter dimension.

    Matching is exact and case-sensitive.
    """
    if flight_filter.month and epoch_to_calendar_month(flight.date, tz) != flight_filter.month:
        return False
    if flight_filter.student and flight.student != flight_filter.student:
        return False
    if flight_filter.aircraft and flight.aircraft != flight_filter.aircraft:
        return False
    return True


def filter_flights(
    flights: Iterable[FlightRecord],
    month: str = "",
    student: str = "",
    aircraft: str = "",
    tz: tzinfo = timezone.utc,
) -> list[FlightRecord]:
    """Return the flights matching all given filters, in input order."""
    flight_filter = FlightFilter(month=month, student=student, aircraft=aircraft)
    return [f for f in flights if flight_matches(f, flight_filter, tz)]

"""Daily and monthly flight statistics."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo

from flightlog.models import AircraftKey, FlightRecord
from flightlog.timeconv import epoch_to_calendar_day


@dataclass
class FlightStats:
    """Counts and minutes for today and this month, plus minutes per aircraft."""

    daily_flight_count: int = 0
    daily_minutes: int = 0
    monthly_flight_count: int = 0
    monthly_minutes: int = 0
    aircraft_minutes: dict[AircraftKey, int] = field(default_factory=dict)
    # Display label per aircraft key, taken from the most recent flight.
    aircraft_labels: dict[AircraftKey, str] = field(default_factory=dict)


def calendar_day_of(now: datetime, tz: tzinfo = timezone.utc) -> str:
    """Calendar day (YYYY-MM-DD) of an aware ``now`` in ``tz``."""
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    return now.astimezone(tz).date().isoformat()


def aggregate_flight_stats(
    flights: Iterable[FlightRecord],
    now: datetime,
    tz: tzinfo = timezone.utc,
) -> FlightStats:
    """Bucket flights into today / this month in one pass.

    A flight counts for today when its calendar day in ``tz`` equals that of
    ``now``, and for this month when the calendar months match. Per-aircraft
    minutes cover every flight regardless of date.
    """
    today = calendar_day_of(now, tz)
    this_month = today[:7]

    stats = FlightStats()
    latest: dict[AircraftKey, int] = {}

    for flight in flights:
        day = epoch_to_calendar_day(flight.date, tz)
        if day == today:
            stats.daily_flight_count += 1
            stats.daily_minutes += flight.duration
        if day[:7] == this_month:
            stats.monthly_flight_count += 1
            stats.monthly_minutes += flight.duration

        key = flight.aircraft_key
        stats.aircraft_minutes[key] = stats.aircraft_minutes.get(key, 0) + flight.duration
        if key not in latest or flight.date >= latest[key]:
            latest[key] = flight.date
            stats.aircraft_labels[key] = flight.aircraft

    return stats

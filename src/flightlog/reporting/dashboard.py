"""Dashboard snapshot composition."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone, tzinfo

from flightlog.models import DashboardSnapshot, FlightRecord, ManualHourEntry
from flightlog.reporting.stats import aggregate_flight_stats
from flightlog.reporting.utilization import merge_utilization

RECENT_FLIGHTS_LIMIT = 8


def recent_flights(
    flights: Iterable[FlightRecord], limit: int = RECENT_FLIGHTS_LIMIT
) -> list[FlightRecord]:
    """Most recent flights first; equal timestamps keep their input order."""
    # sorted() stays stable with reverse=True
    return sorted(flights, key=lambda f: f.date, reverse=True)[:limit]


def build_dashboard(
    flights: Sequence[FlightRecord],
    manual_entries: Iterable[ManualHourEntry],
    now: datetime,
    tz: tzinfo = timezone.utc,
    recent_limit: int = RECENT_FLIGHTS_LIMIT,
) -> DashboardSnapshot:
    """Build the dashboard from a consistent snapshot of flights and manual hours.

    Args:
        flights: Every logged flight.
        manual_entries: Manual hour totals per aircraft.
        now: Reference instant (timezone-aware) defining "today" and "this month".
        tz: Timezone whose calendar days/months are used for bucketing.
        recent_limit: Maximum number of recent flights returned.
    """
    stats = aggregate_flight_stats(flights, now, tz)
    utilization = merge_utilization(
        stats.aircraft_minutes, manual_entries, labels=stats.aircraft_labels
    )
    return DashboardSnapshot(
        daily_flight_count=stats.daily_flight_count,
        daily_minutes=stats.daily_minutes,
        monthly_flight_count=stats.monthly_flight_count,
        monthly_minutes=stats.monthly_minutes,
        recent_flights=recent_flights(flights, recent_limit),
        utilization=utilization,
    )

"""Reporting engine: statistics, utilization, filtering and dashboard snapshots.

Pure functions over already-fetched collections; nothing here performs I/O.
"""

from flightlog.reporting.dashboard import (  # noqa: F401
    RECENT_FLIGHTS_LIMIT,
    build_dashboard,
    recent_flights,
)
from flightlog.reporting.filters import filter_flights, flight_matches  # noqa: F401
from flightlog.reporting.stats import FlightStats, aggregate_flight_stats  # noqa: F401
from flightlog.reporting.utilization import (  # noqa: F401
    max_utilization,
    merge_utilization,
    utilization_percentages,
)

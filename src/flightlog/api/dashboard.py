"""API endpoint for the dashboard snapshot."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from flightlog.api.deps import get_now, get_settings
from flightlog.config import ReportSettings
from flightlog.db.deps import get_db
from flightlog.models import DashboardSnapshot, FlightRecord
from flightlog.reporting import build_dashboard, utilization_percentages
from flightlog.storage.aircraft_hours import list_aircraft_manual_hours
from flightlog.storage.flights import list_flights
from flightlog.timeconv import format_hours

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class UtilizationBar(BaseModel):
    """One utilization row with its bar width relative to the busiest aircraft."""

    aircraft_name: str
    aircraft_id: int | None = None
    total_minutes: int
    total_display: str
    percent: float


class DashboardResponse(BaseModel):
    daily_flight_count: int
    daily_minutes: int
    daily_display: str
    monthly_flight_count: int
    monthly_minutes: int
    monthly_display: str
    recent_flights: list[FlightRecord]
    utilization: list[UtilizationBar]
    max_utilization_minutes: int | None = None


def _snapshot_to_response(snapshot: DashboardSnapshot) -> DashboardResponse:
    bars = [
        UtilizationBar(
            aircraft_name=row.aircraft_name,
            aircraft_id=row.aircraft_id,
            total_minutes=row.total_minutes,
            total_display=format_hours(row.total_minutes),
            percent=pct,
        )
        for row, pct in utilization_percentages(snapshot.utilization)
    ]
    return DashboardResponse(
        daily_flight_count=snapshot.daily_flight_count,
        daily_minutes=snapshot.daily_minutes,
        daily_display=format_hours(snapshot.daily_minutes),
        monthly_flight_count=snapshot.monthly_flight_count,
        monthly_minutes=snapshot.monthly_minutes,
        monthly_display=format_hours(snapshot.monthly_minutes),
        recent_flights=snapshot.recent_flights,
        utilization=bars,
        max_utilization_minutes=snapshot.max_utilization_minutes,
    )


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    settings: ReportSettings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """Daily and monthly totals, recent flights and aircraft utilization."""
    tz = settings.tzinfo
    flights = list_flights(db, tz=tz)
    manual = list_aircraft_manual_hours(db)
    snapshot = build_dashboard(
        flights, manual, now, tz=tz, recent_limit=settings.recent_limit
    )
    return _snapshot_to_response(snapshot)

"""API endpoints for manually recorded aircraft hours."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from flightlog.api.deps import get_settings
from flightlog.config import ReportSettings
from flightlog.db.deps import get_db
from flightlog.errors import FlightLogError
from flightlog.models import HourLogEntry
from flightlog.storage.aircraft_hours import (
    aircraft_hour_log,
    record_daily_hours,
    running_total_hours,
)
from flightlog.timeconv import date_to_epoch

router = APIRouter(prefix="/aircraft", tags=["aircraft"])


class RecordHoursRequest(BaseModel):
    date: str  # YYYY-MM-DD
    day_hours: int = Field(default=0, ge=0)
    night_hours: int = Field(default=0, ge=0)


class HourLogResponse(BaseModel):
    aircraft_id: int
    total_hours: int
    entries: list[HourLogEntry]


def _hour_log(db: Session, aircraft_id: int) -> HourLogResponse:
    return HourLogResponse(
        aircraft_id=aircraft_id,
        total_hours=running_total_hours(db, aircraft_id),
        entries=aircraft_hour_log(db, aircraft_id),
    )


@router.get("/{aircraft_id}/hours", response_model=HourLogResponse)
def get_hours(aircraft_id: int, db: Session = Depends(get_db)):
    """Hour log and running total for an aircraft."""
    try:
        return _hour_log(db, aircraft_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Aircraft {aircraft_id} not found")


@router.post("/{aircraft_id}/hours", response_model=HourLogResponse, status_code=201)
def add_hours(
    aircraft_id: int,
    req: RecordHoursRequest,
    db: Session = Depends(get_db),
    settings: ReportSettings = Depends(get_settings),
):
    """Record a day's day and night hours; returns the updated log."""
    try:
        date_ns = date_to_epoch(req.date, settings.tzinfo)
        record_daily_hours(db, aircraft_id, date_ns, req.day_hours, req.night_hours)
        return _hour_log(db, aircraft_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Aircraft {aircraft_id} not found")
    except FlightLogError:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

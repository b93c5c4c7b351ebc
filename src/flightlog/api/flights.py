"""API endpoints for logging, listing and exporting flights."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from flightlog.api.deps import get_now, get_settings
from flightlog.config import ReportSettings
from flightlog.db.deps import get_db
from flightlog.errors import FlightLogError
from flightlog.logbook import build_flight_record
from flightlog.models import FlightFilter, FlightRecord, RosterKind
from flightlog.report.csv_export import (
    CSV_MEDIA_TYPE,
    default_export_filename,
    export_flights_csv,
)
from flightlog.storage.flights import list_flights, load_flight, log_flight
from flightlog.storage.roster import find_entity, load_entity

router = APIRouter(prefix="/flights", tags=["flights"])


class CreateFlightRequest(BaseModel):
    """Request body for logging a flight.

    Names may be left empty when the matching ``*_id`` is given; the
    roster name is used then.
    """

    date: str  # YYYY-MM-DD
    student: str = ""
    instructor: str = ""
    aircraft: str = ""
    exercise: str = ""
    flight_type: str
    takeoff_time: str  # HH:MM
    landing_time: str  # HH:MM
    landing_type: str
    landing_count: int = 1
    student_id: int | None = None
    instructor_id: int | None = None
    aircraft_id: int | None = None
    exercise_id: int | None = None


_ROSTER_FIELDS = (
    ("student", RosterKind.STUDENTS),
    ("instructor", RosterKind.INSTRUCTORS),
    ("aircraft", RosterKind.AIRCRAFT),
    ("exercise", RosterKind.EXERCISES),
)


def _resolve_roster_fields(db: Session, req: CreateFlightRequest) -> dict:
    """Names and roster ids for the record.

    A given id supplies the roster name. A name given without an id is
    linked to the roster entry of that name when exactly one exists.
    """
    fields = {}
    for field, kind in _ROSTER_FIELDS:
        entity_id = getattr(req, f"{field}_id")
        if entity_id is None:
            name = getattr(req, field)
            match = find_entity(db, kind, name) if name.strip() else None
            fields[field] = name
            fields[f"{field}_id"] = match.id if match else None
            continue
        try:
            fields[field] = load_entity(db, kind, entity_id).name
        except KeyError:
            raise HTTPException(
                status_code=422, detail=f"Unknown {field} id: {entity_id}"
            )
        fields[f"{field}_id"] = entity_id
    return fields


def _flight_filter(month: str, student: str, aircraft: str) -> FlightFilter:
    try:
        return FlightFilter(month=month, student=student, aircraft=aircraft)
    except ValueError:
        raise HTTPException(status_code=422, detail="month must be YYYY-MM format")


@router.get("", response_model=list[FlightRecord])
def list_all_flights(
    month: str = Query(default="", description="YYYY-MM"),
    student: str = "",
    aircraft: str = "",
    db: Session = Depends(get_db),
    settings: ReportSettings = Depends(get_settings),
):
    """List flights in the order they were logged, optionally filtered."""
    flight_filter = _flight_filter(month, student, aircraft)
    return list_flights(db, flight_filter, settings.tzinfo)


@router.post("", response_model=FlightRecord, status_code=201)
def create_flight(
    req: CreateFlightRequest,
    db: Session = Depends(get_db),
    settings: ReportSettings = Depends(get_settings),
):
    """Validate and log a flight. Duration is computed from the times."""
    fields = _resolve_roster_fields(db, req)
    try:
        record = build_flight_record(
            date=req.date,
            flight_type=req.flight_type,
            takeoff_time=req.takeoff_time,
            landing_time=req.landing_time,
            landing_type=req.landing_type,
            landing_count=req.landing_count,
            tz=settings.tzinfo,
            **fields,
        )
    except FlightLogError:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return log_flight(db, record)


@router.get("/export.csv")
def export_csv(
    month: str = Query(default="", description="YYYY-MM"),
    student: str = "",
    aircraft: str = "",
    db: Session = Depends(get_db),
    settings: ReportSettings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """Download the (filtered) flight log as CSV."""
    tz = settings.tzinfo
    flight_filter = _flight_filter(month, student, aircraft)
    flights = list_flights(db, flight_filter, tz)
    filename = default_export_filename(now.astimezone(tz).date())
    return Response(
        content=export_flights_csv(flights, tz),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{flight_id}", response_model=FlightRecord)
def get_flight(flight_id: int, db: Session = Depends(get_db)):
    """Get a single flight."""
    try:
        return load_flight(db, flight_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Flight '{flight_id}' not found")

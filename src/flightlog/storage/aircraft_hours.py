"""Manually recorded aircraft hours."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from flightlog.db.models import AircraftHoursRow, RosterEntityRow
from flightlog.models import HourLogEntry, ManualHourEntry, RosterKind
from flightlog.storage._helpers import unavailable_on_db_error

logger = logging.getLogger(__name__)


def _aircraft_row(session: Session, aircraft_id: int) -> RosterEntityRow:
    row = session.get(RosterEntityRow, aircraft_id)
    if row is None or row.kind != RosterKind.AIRCRAFT.value:
        raise KeyError(f"Aircraft not found: {aircraft_id}")
    return row


def _check_hours(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative whole number")


def record_aircraft_hours(
    session: Session, aircraft_id: int, date_ns: int, hours: int
) -> HourLogEntry:
    """Append an hour log entry for an aircraft. Raises KeyError for unknown aircraft."""
    _check_hours("hours", hours)
    aircraft = _aircraft_row(session, aircraft_id)
    entry = HourLogEntry(date=date_ns, hours=hours)
    session.add(AircraftHoursRow(aircraft_id=aircraft.id, date_ns=date_ns, hours=hours))
    session.flush()
    logger.info("Recorded %d h for aircraft %s", hours, aircraft.name)
    return entry


def record_daily_hours(
    session: Session, aircraft_id: int, date_ns: int, day_hours: int, night_hours: int
) -> HourLogEntry:
    """Record a day's day and night hours as one log entry.

    Both values must be non-negative and at least one positive.
    """
    _check_hours("day_hours", day_hours)
    _check_hours("night_hours", night_hours)
    if day_hours == 0 and night_hours == 0:
        raise ValueError("at least one of day_hours or night_hours must be positive")
    return record_aircraft_hours(session, aircraft_id, date_ns, day_hours + night_hours)


def aircraft_hour_log(session: Session, aircraft_id: int) -> list[HourLogEntry]:
    """Hour log for one aircraft, oldest first. Raises KeyError for unknown aircraft."""
    _aircraft_row(session, aircraft_id)
    stmt = (
        select(AircraftHoursRow)
        .where(AircraftHoursRow.aircraft_id == aircraft_id)
        .order_by(AircraftHoursRow.date_ns, AircraftHoursRow.id)
    )
    rows = session.execute(stmt).scalars().all()
    return [HourLogEntry(date=r.date_ns, hours=r.hours) for r in rows]


def running_total_hours(session: Session, aircraft_id: int) -> int:
    """Sum of all logged hours for one aircraft."""
    _aircraft_row(session, aircraft_id)
    stmt = select(func.coalesce(func.sum(AircraftHoursRow.hours), 0)).where(
        AircraftHoursRow.aircraft_id == aircraft_id
    )
    return int(session.execute(stmt).scalar_one())


@unavailable_on_db_error("aircraft hours")
def list_aircraft_manual_hours(session: Session) -> list[ManualHourEntry]:
    """Manual hour totals for every aircraft on the roster (0 when none logged)."""
    total = func.coalesce(func.sum(AircraftHoursRow.hours), 0)
    stmt = (
        select(RosterEntityRow.id, RosterEntityRow.name, total)
        .outerjoin(AircraftHoursRow, AircraftHoursRow.aircraft_id == RosterEntityRow.id)
        .where(RosterEntityRow.kind == RosterKind.AIRCRAFT.value)
        .group_by(RosterEntityRow.id, RosterEntityRow.name)
        .order_by(RosterEntityRow.id)
    )
    return [
        ManualHourEntry(aircraft_id=aircraft_id, aircraft_name=name, total_hours=int(hours))
        for aircraft_id, name, hours in session.execute(stmt).all()
    ]

"""Flight record storage: database-backed persistence."""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo

from sqlalchemy import select
from sqlalchemy.orm import Session

from flightlog.db.models import FlightRow
from flightlog.models import FlightFilter, FlightRecord
from flightlog.storage._helpers import unavailable_on_db_error
from flightlog.timeconv import month_bounds

logger = logging.getLogger(__name__)


# --- Conversion helpers ---


def _record_to_row(record: FlightRecord) -> FlightRow:
    return FlightRow(
        date_ns=record.date,
        student=record.student,
        instructor=record.instructor,
        aircraft=record.aircraft,
        exercise=record.exercise,
        flight_type=record.flight_type.value,
        takeoff_time=record.takeoff_time,
        landing_time=record.landing_time,
        duration=record.duration,
        landing_type=record.landing_type.value,
        landing_count=record.landing_count,
        student_id=record.student_id,
        instructor_id=record.instructor_id,
        aircraft_id=record.aircraft_id,
        exercise_id=record.exercise_id,
    )


def _row_to_record(row: FlightRow) -> FlightRecord:
    return FlightRecord(
        id=row.id,
        date=row.date_ns,
        student=row.student,
        instructor=row.instructor,
        aircraft=row.aircraft,
        exercise=row.exercise,
        flight_type=row.flight_type,
        takeoff_time=row.takeoff_time,
        landing_time=row.landing_time,
        duration=row.duration,
        landing_type=row.landing_type,
        landing_count=row.landing_count,
        student_id=row.student_id,
        instructor_id=row.instructor_id,
        aircraft_id=row.aircraft_id,
        exercise_id=row.exercise_id,
    )


# --- Flight operations ---


def log_flight(session: Session, record: FlightRecord) -> FlightRecord:
    """Insert a flight record. Returns the record with its assigned id."""
    row = _record_to_row(record)
    session.add(row)
    session.flush()
    logger.info(
        "Logged flight %d: %s in %s (%d min)",
        row.id, record.student, record.aircraft, record.duration,
    )
    return record.model_copy(update={"id": row.id})


def load_flight(session: Session, flight_id: int) -> FlightRecord:
    """Load a flight by id. Raises KeyError if not found."""
    row = session.get(FlightRow, flight_id)
    if row is None:
        raise KeyError(f"Flight not found: {flight_id}")
    return _row_to_record(row)


@unavailable_on_db_error("flights")
def list_flights(
    session: Session,
    flight_filter: FlightFilter | None = None,
    tz: tzinfo = timezone.utc,
) -> list[FlightRecord]:
    """List flights in insertion order, optionally filtered.

    Same semantics as ``reporting.filters.filter_flights``: the month bounds
    are taken in ``tz`` and name matches are exact.
    """
    stmt = select(FlightRow)
    if flight_filter is not None:
        if flight_filter.month:
            start, end = month_bounds(flight_filter.month, tz)
            stmt = stmt.where(FlightRow.date_ns >= start, FlightRow.date_ns < end)
        if flight_filter.student:
            stmt = stmt.where(FlightRow.student == flight_filter.student)
        if flight_filter.aircraft:
            stmt = stmt.where(FlightRow.aircraft == flight_filter.aircraft)
    stmt = stmt.order_by(FlightRow.id)
    rows = session.execute(stmt).scalars().all()
    return [_row_to_record(r) for r in rows]

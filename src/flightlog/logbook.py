"""Build validated flight records from data-entry values."""

from __future__ import annotations

from datetime import timezone, tzinfo

from flightlog.models import FlightRecord, FlightType, LandingType
from flightlog.timeconv import date_to_epoch, duration_minutes


def _required_name(field: str, value: str) -> str:
    name = (value or "").strip()
    if not name:
        raise ValueError(f"{field} is required")
    return name


def build_flight_record(
    date: str,
    student: str,
    instructor: str,
    aircraft: str,
    exercise: str,
    flight_type: FlightType | str,
    takeoff_time: str,
    landing_time: str,
    landing_type: LandingType | str,
    landing_count: int = 1,
    *,
    tz: tzinfo = timezone.utc,
    student_id: int | None = None,
    instructor_id: int | None = None,
    aircraft_id: int | None = None,
    exercise_id: int | None = None,
) -> FlightRecord:
    """Validate a logbook entry and return the FlightRecord for it.

    Args:
        date: Flight date as YYYY-MM-DD, stored as midnight in ``tz``.
        takeoff_time: HH:MM.
        landing_time: HH:MM, strictly after takeoff on the same day.
        landing_count: At least 1.

    Raises:
        InvalidDate: malformed date.
        InvalidTimeFormat: malformed takeoff or landing time.
        InvalidDuration: landing at or before takeoff.
        ValueError: missing names, unknown flight/landing type, landing_count < 1.
    """
    timestamp = date_to_epoch(date, tz)
    duration = duration_minutes(takeoff_time, landing_time)

    if landing_count < 1:
        raise ValueError("landing_count must be at least 1")

    return FlightRecord(
        date=timestamp,
        student=_required_name("student", student),
        instructor=_required_name("instructor", instructor),
        aircraft=_required_name("aircraft", aircraft),
        exercise=_required_name("exercise", exercise),
        flight_type=FlightType(flight_type),
        takeoff_time=takeoff_time,
        landing_time=landing_time,
        duration=duration,
        landing_type=LandingType(landing_type),
        landing_count=landing_count,
        student_id=student_id,
        instructor_id=instructor_id,
        aircraft_id=aircraft_id,
        exercise_id=exercise_id,
    )

"""Pydantic v2 models for flightlog."""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flightlog.timeconv import MINUTES_PER_HOUR, TIME_PATTERN, is_valid_month

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Aircraft are grouped by roster id when known, otherwise by display name.
AircraftKey = Union[int, str]


class FlightType(str, Enum):
    """Solo or dual (with instructor) flight."""

    SOLO = "solo"
    DUAL = "dual"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class LandingType(str, Enum):
    """Day or night landing."""

    DAY = "day"
    NIGHT = "night"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class RosterKind(str, Enum):
    """Roster lists maintained by the school."""

    STUDENTS = "students"
    INSTRUCTORS = "instructors"
    AIRCRAFT = "aircraft"
    EXERCISES = "exercises"


class RosterEntity(BaseModel):
    """A named student, instructor, aircraft or exercise."""

    id: int
    kind: RosterKind
    name: str


class FlightRecord(BaseModel):
    """One logged flight.

    Crew, aircraft and exercise are carried as display names. The optional
    ``*_id`` fields reference roster entities so a rename does not detach
    historical records.
    """

    model_config = ConfigDict(frozen=True)

    date: int = Field(ge=INT64_MIN, le=INT64_MAX)  # ns since epoch
    student: str
    instructor: str
    aircraft: str
    exercise: str
    flight_type: FlightType
    takeoff_time: str = Field(pattern=TIME_PATTERN)
    landing_time: str = Field(pattern=TIME_PATTERN)
    duration: int = Field(ge=0)  # minutes
    landing_type: LandingType
    landing_count: int = Field(ge=1)

    id: int | None = None
    student_id: int | None = None
    instructor_id: int | None = None
    aircraft_id: int | None = None
    exercise_id: int | None = None

    @property
    def aircraft_key(self) -> AircraftKey:
        return self.aircraft_id if self.aircraft_id is not None else self.aircraft


class HourLogEntry(BaseModel):
    """Hours recorded against an aircraft outside of logged flights."""

    date: int = Field(ge=INT64_MIN, le=INT64_MAX)
    hours: int = Field(ge=0)


class ManualHourEntry(BaseModel):
    """Total manually logged hours for one aircraft."""

    model_config = ConfigDict(frozen=True)

    aircraft_name: str
    total_hours: int = Field(ge=0)
    aircraft_id: int | None = None

    @property
    def total_minutes(self) -> int:
        return self.total_hours * MINUTES_PER_HOUR

    @property
    def aircraft_key(self) -> AircraftKey:
        return self.aircraft_id if self.aircraft_id is not None else self.aircraft_name


class UtilizationRow(BaseModel):
    """Minutes flown per aircraft, merged from flights and manual hours."""

    model_config = ConfigDict(frozen=True)

    aircraft_name: str
    total_minutes: int = Field(ge=0)
    aircraft_id: int | None = None


class DashboardSnapshot(BaseModel):
    """Derived dashboard statistics. Recomputed on every request, never stored."""

    model_config = ConfigDict(frozen=True)

    daily_flight_count: int = 0
    daily_minutes: int = 0
    monthly_flight_count: int = 0
    monthly_minutes: int = 0
    recent_flights: list[FlightRecord] = Field(default_factory=list)
    utilization: list[UtilizationRow] = Field(default_factory=list)

    @property
    def max_utilization_minutes(self) -> int | None:
        """Largest utilization total (rows are sorted descending), None if no rows."""
        return self.utilization[0].total_minutes if self.utilization else None


class FlightFilter(BaseModel):
    """Record view filter. Empty strings disable a dimension."""

    month: str = ""  # YYYY-MM
    student: str = ""
    aircraft: str = ""

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str) -> str:
        if v and not is_valid_month(v):
            raise ValueError("month must be YYYY-MM format")
        return v

    @property
    def is_empty(self) -> bool:
        return not (self.month or self.student or self.aircraft)

"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flightlog.db.models import Base
from flightlog.models import FlightRecord, FlightType, LandingType
from flightlog.timeconv import date_to_epoch, datetime_to_epoch


@pytest.fixture
def db_engine():
    """In-memory SQLite engine for tests."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, _connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Yield a SQLAlchemy session per test, rolled back after."""
    session = sessionmaker(bind=db_engine)()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def now():
    """Reference instant: 2024-03-15 12:00 UTC."""
    return datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_flight():
    """Factory for FlightRecords.

    ``day`` is a YYYY-MM-DD string stored as UTC midnight; pass ``at`` (an
    aware datetime) instead for a precise timestamp.
    """

    def _make(
        day: str = "2024-03-15",
        student: str = "Alice",
        instructor: str = "Bob",
        aircraft: str = "G-ABCD",
        exercise: str = "Circuits",
        duration: int = 60,
        flight_type: FlightType = FlightType.DUAL,
        landing_type: LandingType = LandingType.DAY,
        landing_count: int = 1,
        at: datetime | None = None,
        **kwargs,
    ) -> FlightRecord:
        timestamp = datetime_to_epoch(at) if at is not None else date_to_epoch(day)
        landing = 9 * 60 + duration
        return FlightRecord(
            date=timestamp,
            student=student,
            instructor=instructor,
            aircraft=aircraft,
            exercise=exercise,
            flight_type=flight_type,
            takeoff_time="09:00",
            landing_time=f"{landing // 60:02d}:{landing % 60:02d}",
            duration=duration,
            landing_type=landing_type,
            landing_count=landing_count,
            **kwargs,
        )

    return _make

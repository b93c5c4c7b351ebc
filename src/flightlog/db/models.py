"""SQLAlchemy ORM models for all persistent tables."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class RosterEntityRow(Base):
    __tablename__ = "roster_entities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(16), index=True)
    name: Mapped[str] = mapped_column(String(256))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    hour_log: Mapped[list[AircraftHoursRow]] = relationship(
        back_populates="aircraft", cascade="all, delete-orphan"
    )


class FlightRow(Base):
    __tablename__ = "flights"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date_ns: Mapped[int] = mapped_column(BigInteger, index=True)
    student: Mapped[str] = mapped_column(String(256))
    instructor: Mapped[str] = mapped_column(String(256))
    aircraft: Mapped[str] = mapped_column(String(256), index=True)
    exercise: Mapped[str] = mapped_column(String(256))
    flight_type: Mapped[str] = mapped_column(String(8))
    takeoff_time: Mapped[str] = mapped_column(String(5))
    landing_time: Mapped[str] = mapped_column(String(5))
    duration: Mapped[int] = mapped_column(Integer)
    landing_type: Mapped[str] = mapped_column(String(8))
    landing_count: Mapped[int] = mapped_column(Integer, default=1)

    # Names above are labels; these keep the link when a roster entry is renamed.
    student_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("roster_entities.id", ondelete="SET NULL"), nullable=True
    )
    instructor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("roster_entities.id", ondelete="SET NULL"), nullable=True
    )
    aircraft_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("roster_entities.id", ondelete="SET NULL"), nullable=True
    )
    exercise_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("roster_entities.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )


class AircraftHoursRow(Base):
    __tablename__ = "aircraft_hours"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    aircraft_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("roster_entities.id", ondelete="CASCADE"), index=True
    )
    date_ns: Mapped[int] = mapped_column(BigInteger)
    hours: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    aircraft: Mapped[RosterEntityRow] = relationship(back_populates="hour_log")

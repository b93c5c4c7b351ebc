"""Initial schema: roster_entities, flights, aircraft_hours.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _roster_fk(column: str) -> sa.Column:
    return sa.Column(
        column,
        sa.Integer,
        sa.ForeignKey("roster_entities.id", ondelete="SET NULL"),
        nullable=True,
    )


def upgrade() -> None:
    op.create_table(
        "roster_entities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(16), nullable=False, index=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "flights",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("date_ns", sa.BigInteger, nullable=False, index=True),
        sa.Column("student", sa.String(256), nullable=False),
        sa.Column("instructor", sa.String(256), nullable=False),
        sa.Column("aircraft", sa.String(256), nullable=False, index=True),
        sa.Column("exercise", sa.String(256), nullable=False),
        sa.Column("flight_type", sa.String(8), nullable=False),
        sa.Column("takeoff_time", sa.String(5), nullable=False),
        sa.Column("landing_time", sa.String(5), nullable=False),
        sa.Column("duration", sa.Integer, nullable=False),
        sa.Column("landing_type", sa.String(8), nullable=False),
        sa.Column("landing_count", sa.Integer, nullable=False, server_default=sa.text("1")),
        _roster_fk("student_id"),
        _roster_fk("instructor_id"),
        _roster_fk("aircraft_id"),
        _roster_fk("exercise_id"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "aircraft_hours",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "aircraft_id",
            sa.Integer,
            sa.ForeignKey("roster_entities.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("date_ns", sa.BigInteger, nullable=False),
        sa.Column("hours", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("aircraft_hours")
    op.drop_table("flights")
    op.drop_table("roster_entities")

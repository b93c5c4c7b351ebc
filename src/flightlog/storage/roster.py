"""Roster storage: students, instructors, aircraft and exercises."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from flightlog.db.models import RosterEntityRow
from flightlog.models import RosterEntity, RosterKind
from flightlog.storage._helpers import unavailable_on_db_error

logger = logging.getLogger(__name__)


def _kind(kind: RosterKind | str) -> RosterKind:
    try:
        return RosterKind(kind)
    except ValueError:
        raise ValueError(f"Unknown roster list: {kind}") from None


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("name is required")
    return cleaned


def _row_to_entity(row: RosterEntityRow) -> RosterEntity:
    return RosterEntity(id=row.id, kind=row.kind, name=row.name)


def _get_row(session: Session, kind: RosterKind, entity_id: int) -> RosterEntityRow:
    row = session.get(RosterEntityRow, entity_id)
    if row is None or row.kind != kind.value:
        raise KeyError(f"{kind.value} entry not found: {entity_id}")
    return row


def add_entity(session: Session, kind: RosterKind | str, name: str) -> RosterEntity:
    """Add a named entry to a roster list."""
    kind = _kind(kind)
    row = RosterEntityRow(kind=kind.value, name=_clean_name(name))
    session.add(row)
    session.flush()
    logger.info("Added %s entry %d: %s", kind.value, row.id, row.name)
    return _row_to_entity(row)


def edit_entity(
    session: Session, kind: RosterKind | str, entity_id: int, name: str
) -> RosterEntity:
    """Rename a roster entry. Raises KeyError if not found.

    Flights keep the name they were logged with; they stay linked by id.
    """
    kind = _kind(kind)
    cleaned = _clean_name(name)
    row = _get_row(session, kind, entity_id)
    row.name = cleaned
    session.flush()
    logger.info("Renamed %s entry %d to %s", kind.value, entity_id, cleaned)
    return _row_to_entity(row)


def delete_entity(session: Session, kind: RosterKind | str, entity_id: int) -> None:
    """Delete a roster entry (and, for aircraft, its hour log). Raises KeyError if not found."""
    kind = _kind(kind)
    row = _get_row(session, kind, entity_id)
    session.delete(row)
    session.flush()
    logger.info("Deleted %s entry %d", kind.value, entity_id)


def load_entity(session: Session, kind: RosterKind | str, entity_id: int) -> RosterEntity:
    """Load a roster entry by id. Raises KeyError if not found."""
    return _row_to_entity(_get_row(session, _kind(kind), entity_id))


@unavailable_on_db_error("roster")
def find_entity(session: Session, kind: RosterKind | str, name: str) -> RosterEntity | None:
    """The roster entry with exactly this name, or None if there is none or several."""
    kind = _kind(kind)
    stmt = (
        select(RosterEntityRow)
        .where(RosterEntityRow.kind == kind.value, RosterEntityRow.name == name.strip())
        .order_by(RosterEntityRow.id)
        .limit(2)
    )
    rows = session.execute(stmt).scalars().all()
    return _row_to_entity(rows[0]) if len(rows) == 1 else None


@unavailable_on_db_error("roster")
def list_entities(session: Session, kind: RosterKind | str) -> list[RosterEntity]:
    """List a roster in insertion order."""
    kind = _kind(kind)
    stmt = (
        select(RosterEntityRow)
        .where(RosterEntityRow.kind == kind.value)
        .order_by(RosterEntityRow.id)
    )
    rows = session.execute(stmt).scalars().all()
    return [_row_to_entity(r) for r in rows]

"""API endpoints for the student, instructor, aircraft and exercise lists."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from flightlog.db.deps import get_db
from flightlog.models import RosterEntity, RosterKind
from flightlog.storage.roster import (
    add_entity,
    delete_entity,
    edit_entity,
    list_entities,
)

router = APIRouter(prefix="/roster", tags=["roster"])


class EntityRequest(BaseModel):
    name: str


@router.get("/{kind}", response_model=list[RosterEntity])
def list_roster(kind: RosterKind, db: Session = Depends(get_db)):
    return list_entities(db, kind)


@router.post("/{kind}", response_model=RosterEntity, status_code=201)
def create_entity(kind: RosterKind, req: EntityRequest, db: Session = Depends(get_db)):
    try:
        return add_entity(db, kind, req.name)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.put("/{kind}/{entity_id}", response_model=RosterEntity)
def rename_entity(
    kind: RosterKind, entity_id: int, req: EntityRequest, db: Session = Depends(get_db)
):
    """Rename an entry. Logged flights keep their original name label."""
    try:
        return edit_entity(db, kind, entity_id, req.name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"{kind.value} entry {entity_id} not found")
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.delete("/{kind}/{entity_id}", status_code=204)
def remove_entity(kind: RosterKind, entity_id: int, db: Session = Depends(get_db)):
    try:
        delete_entity(db, kind, entity_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"{kind.value} entry {entity_id} not found")
    return Response(status_code=204)

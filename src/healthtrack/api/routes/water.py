"""Water entry routes."""
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session

from healthtrack.db.crud import (
    create_row,
    delete_row,
    list_for_user,
    update_row,
    user_exists,
)
from healthtrack.db.engine import get_session
from healthtrack.models.entries import (
    WaterEntry,
    WaterEntryCreate,
    WaterEntryRead,
    WaterEntryUpdate,
    partial_changes,
)

router = APIRouter()


@router.get("/users/{user_id}/water-entries", response_model=List[WaterEntryRead])
def list_water_entries(user_id: int, session: Session = Depends(get_session)):
    return list_for_user(session, WaterEntry, user_id)


@router.post("/water-entries", response_model=WaterEntryRead, status_code=201)
def create_water_entry(payload: WaterEntryCreate, session: Session = Depends(get_session)):
    if not user_exists(session, payload.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return create_row(session, WaterEntry, payload)


@router.put("/water-entries/{entry_id}", response_model=WaterEntryRead)
def update_water_entry(
    entry_id: uuid.UUID,
    payload: WaterEntryUpdate,
    session: Session = Depends(get_session),
):
    entry = update_row(session, WaterEntry, entry_id, partial_changes(payload, WaterEntry))
    if not entry:
        raise HTTPException(status_code=404, detail="Water entry not found")
    return entry


@router.delete("/water-entries/{entry_id}", status_code=204)
def delete_water_entry(entry_id: uuid.UUID, session: Session = Depends(get_session)):
    if not delete_row(session, WaterEntry, entry_id):
        raise HTTPException(status_code=404, detail="Water entry not found")
    return Response(status_code=204)

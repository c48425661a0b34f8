"""Weight entry routes."""
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
    WeightEntry,
    WeightEntryCreate,
    WeightEntryRead,
    WeightEntryUpdate,
    partial_changes,
)

router = APIRouter()


@router.get("/users/{user_id}/weight-entries", response_model=List[WeightEntryRead])
def list_weight_entries(user_id: int, session: Session = Depends(get_session)):
    """List a user's weigh-ins, oldest first."""
    return list_for_user(session, WeightEntry, user_id)


@router.post("/weight-entries", response_model=WeightEntryRead, status_code=201)
def create_weight_entry(
    payload: WeightEntryCreate, session: Session = Depends(get_session)
):
    if not user_exists(session, payload.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return create_row(session, WeightEntry, payload)


@router.put("/weight-entries/{entry_id}", response_model=WeightEntryRead)
def update_weight_entry(
    entry_id: uuid.UUID,
    payload: WeightEntryUpdate,
    session: Session = Depends(get_session),
):
    entry = update_row(
        session, WeightEntry, entry_id, partial_changes(payload, WeightEntry)
    )
    if not entry:
        raise HTTPException(status_code=404, detail="Weight entry not found")
    return entry


@router.delete("/weight-entries/{entry_id}", status_code=204)
def delete_weight_entry(entry_id: uuid.UUID, session: Session = Depends(get_session)):
    if not delete_row(session, WeightEntry, entry_id):
        raise HTTPException(status_code=404, detail="Weight entry not found")
    return Response(status_code=204)

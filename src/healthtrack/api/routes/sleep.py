"""Sleep entry routes."""
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
    SleepEntry,
    SleepEntryCreate,
    SleepEntryRead,
    SleepEntryUpdate,
    partial_changes,
)

router = APIRouter()


@router.get("/users/{user_id}/sleep-entries", response_model=List[SleepEntryRead])
def list_sleep_entries(user_id: int, session: Session = Depends(get_session)):
    return list_for_user(session, SleepEntry, user_id)


@router.post("/sleep-entries", response_model=SleepEntryRead, status_code=201)
def create_sleep_entry(payload: SleepEntryCreate, session: Session = Depends(get_session)):
    if not user_exists(session, payload.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return create_row(session, SleepEntry, payload)


@router.put("/sleep-entries/{entry_id}", response_model=SleepEntryRead)
def update_sleep_entry(
    entry_id: uuid.UUID,
    payload: SleepEntryUpdate,
    session: Session = Depends(get_session),
):
    entry = update_row(
        session,
        SleepEntry,
        entry_id,
        partial_changes(payload, SleepEntry),
    )
    if not entry:
        raise HTTPException(status_code=404, detail="Sleep entry not found")
    return entry


@router.delete("/sleep-entries/{entry_id}", status_code=204)
def delete_sleep_entry(entry_id: uuid.UUID, session: Session = Depends(get_session)):
    if not delete_row(session, SleepEntry, entry_id):
        raise HTTPException(status_code=404, detail="Sleep entry not found")
    return Response(status_code=204)

"""User settings routes. Settings are created once, then only updated."""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from healthtrack.db.crud import get_user_settings, user_exists
from healthtrack.db.engine import get_session
from healthtrack.models.settings import (
    UserSettings,
    UserSettingsCreate,
    UserSettingsRead,
    UserSettingsUpdate,
    settings_changes,
)

router = APIRouter()


@router.get("/users/{user_id}/settings", response_model=UserSettingsRead)
def read_settings(user_id: int, session: Session = Depends(get_session)):
    settings = get_user_settings(session, user_id)
    if not settings:
        raise HTTPException(status_code=404, detail="Settings not found")
    return settings


@router.post("/users/{user_id}/settings", response_model=UserSettingsRead, status_code=201)
def create_settings(
    user_id: int,
    payload: UserSettingsCreate,
    session: Session = Depends(get_session),
):
    """First-use creation. A second POST for the same user is a conflict."""
    if not user_exists(session, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    if get_user_settings(session, user_id):
        raise HTTPException(status_code=409, detail="Settings already exist")
    settings = UserSettings.model_validate(payload, update={"user_id": user_id})
    session.add(settings)
    session.commit()
    session.refresh(settings)
    return settings


@router.put("/users/{user_id}/settings", response_model=UserSettingsRead)
def update_settings(
    user_id: int,
    payload: UserSettingsUpdate,
    session: Session = Depends(get_session),
):
    settings = get_user_settings(session, user_id)
    if not settings:
        raise HTTPException(status_code=404, detail="Settings not found")
    settings.sqlmodel_update(settings_changes(settings, payload))
    settings.updated_at = datetime.utcnow()
    session.add(settings)
    session.commit()
    session.refresh(settings)
    return settings

"""User routes."""
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from healthtrack.db.engine import get_session
from healthtrack.models.user import User, UserCreate, UserRead

router = APIRouter()


@router.post("/users", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, session: Session = Depends(get_session)):
    """Register a user. Usernames are unique."""
    taken = session.exec(select(User).where(User.username == payload.username)).first()
    if taken:
        raise HTTPException(status_code=409, detail="Username already exists")
    user = User.model_validate(payload)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@router.get("/users/{user_id}", response_model=UserRead)
def get_user(user_id: int, session: Session = Depends(get_session)):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

"""
Single-table CRUD helpers shared by the entry routes.

Every write touches exactly one row; there is no cascading and no
multi-entity transaction anywhere.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlmodel import Session, SQLModel, select

from healthtrack.models.user import User

M = TypeVar("M", bound=SQLModel)


def user_exists(session: Session, user_id: int) -> bool:
    return session.get(User, user_id) is not None


def list_for_user(session: Session, model: Type[M], user_id: int) -> List[M]:
    """All rows owned by user_id, oldest date first (then time of day, if any)."""
    order = [model.date]
    if "time" in model.model_fields:
        order.append(model.time)
    order.append(model.created_at)
    return list(
        session.exec(select(model).where(model.user_id == user_id).order_by(*order)).all()
    )


def create_row(session: Session, model: Type[M], payload: SQLModel) -> M:
    row = model.model_validate(payload)
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def update_row(
    session: Session,
    model: Type[M],
    row_id: Any,
    changes: Dict[str, Any],
) -> Optional[M]:
    """Apply a partial update. Returns None if the row does not exist."""
    row = session.get(model, row_id)
    if row is None:
        return None
    row.sqlmodel_update(changes)
    if hasattr(row, "updated_at"):
        row.updated_at = datetime.utcnow()
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def delete_row(session: Session, model: Type[M], row_id: Any) -> bool:
    """Hard-delete by id. Returns False if nothing was deleted."""
    row = session.get(model, row_id)
    if row is None:
        return False
    session.delete(row)
    session.commit()
    return True


def get_user_settings(session: Session, user_id: int):
    from healthtrack.models.settings import UserSettings

    return session.exec(
        select(UserSettings).where(UserSettings.user_id == user_id)
    ).first()

"""SQLModel engine singleton and session dependency."""
import logging
from typing import Generator

from sqlmodel import Session, SQLModel, create_engine

from healthtrack.config import get_settings

logger = logging.getLogger(__name__)

_engine = None


def get_engine():
    """Return the module-level engine, creating it on first call."""
    global _engine
    if _engine is None:
        settings = get_settings()
        connect_args = {}
        if settings.database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False  # SQLite only; safe for FastAPI
        _engine = create_engine(settings.database_url, connect_args=connect_args)
        init_db(_engine)
    return _engine


def init_db(engine) -> None:
    """Create all tables (idempotent)."""
    # Import all models so metadata is populated before create_all
    from healthtrack.models.user import User  # noqa
    from healthtrack.models.entries import SleepEntry, WaterEntry, WeightEntry  # noqa
    from healthtrack.models.settings import UserSettings  # noqa
    SQLModel.metadata.create_all(engine)


def ensure_user(engine, user_id: int, username: str) -> None:
    """Create the single-user MVP's user row if it does not exist yet."""
    from healthtrack.models.user import User

    with Session(engine) as session:
        if session.get(User, user_id) is None:
            session.add(User(id=user_id, username=username))
            session.commit()
            logger.info("Created user %d (%s)", user_id, username)


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a DB session."""
    with Session(get_engine()) as session:
        yield session

"""Shared test fixtures."""
from datetime import date, datetime
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models so SQLModel.metadata knows about them
from healthtrack.models.user import User
from healthtrack.models.entries import SleepEntry, SleepQuality, WaterEntry, WeightEntry
from healthtrack.models.settings import UserSettings  # noqa: F401
from healthtrack.api.main import create_app
from healthtrack.db.engine import get_session


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="test_session")
def test_session_fixture(engine) -> Generator[Session, None, None]:
    """Provides a DB session connected to in-memory SQLite."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="user")
def user_fixture(engine) -> User:
    """The single default user (id 1)."""
    with Session(engine) as s:
        user = s.get(User, 1)
        if user is None:
            user = User(id=1, username="default", created_at=datetime(2025, 1, 1))
            s.add(user)
            s.commit()
            s.refresh(user)
        return user


@pytest.fixture(name="client")
def client_fixture(engine):
    """TestClient over the real app, with sessions bound to the test engine."""
    app = create_app(engine=engine)

    def override_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    with TestClient(app) as c:
        yield c


@pytest.fixture(name="seeded_engine")
def seeded_engine_fixture(engine, user):
    """Engine with a week of weigh-ins, drinks and nights for user 1."""
    with Session(engine) as s:
        for day, kg in [(10, 72.4), (11, 72.0), (12, 71.6)]:
            s.add(WeightEntry(user_id=1, weight=kg, date=date(2025, 3, day),
                              created_at=datetime(2025, 3, day, 7)))
        for time, ml in [("08:00", 500), ("12:30", 750), ("18:00", 750)]:
            s.add(WaterEntry(user_id=1, amount=ml, date=date(2025, 3, 12), time=time))
        s.add(WaterEntry(user_id=1, amount=1000, date=date(2025, 3, 11), time="09:00"))
        s.add(SleepEntry(user_id=1, bedtime="23:30", wakeup_time="06:30",
                         date=date(2025, 3, 11), quality=SleepQuality.GOOD))
        s.commit()
    return engine

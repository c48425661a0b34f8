"""Logged entry models: weight, water and sleep."""
import uuid
from datetime import date as Date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Type

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from healthtrack.analysis.sleep import normalize_clock
from healthtrack.analysis.units import require_finite


class SleepQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


def _optional_clock(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return normalize_clock(value)


# ─── Weight ───────────────────────────────────────────────────────────────────

class WeightEntryBase(SQLModel):
    weight: float = Field(gt=0)  # kilograms
    date: Date = Field(index=True)
    notes: Optional[str] = None

    @field_validator("weight")
    @classmethod
    def _check_weight(cls, value):
        return require_finite(value)


class WeightEntry(WeightEntryBase, table=True):
    """One weigh-in. Several per day are allowed."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class WeightEntryCreate(WeightEntryBase):
    user_id: int


class WeightEntryRead(WeightEntryBase):
    id: uuid.UUID
    user_id: int
    created_at: Optional[datetime] = None


class WeightEntryUpdate(SQLModel):
    weight: Optional[float] = Field(default=None, gt=0)
    date: Optional[Date] = None
    notes: Optional[str] = None

    @field_validator("weight")
    @classmethod
    def _check_weight(cls, value):
        return require_finite(value)


# ─── Water ────────────────────────────────────────────────────────────────────

class WaterEntryBase(SQLModel):
    amount: int = Field(gt=0)  # milliliters
    date: Date = Field(index=True)
    time: str  # HH:MM, no timezone

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        return normalize_clock(value)


class WaterEntry(WaterEntryBase, table=True):
    """One drink. Entries on the same date add up toward the daily goal."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class WaterEntryCreate(WaterEntryBase):
    user_id: int


class WaterEntryRead(WaterEntryBase):
    id: uuid.UUID
    user_id: int
    created_at: Optional[datetime] = None


class WaterEntryUpdate(SQLModel):
    amount: Optional[int] = Field(default=None, gt=0)
    date: Optional[Date] = None
    time: Optional[str] = None

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: Optional[str]) -> Optional[str]:
        return _optional_clock(value)


# ─── Sleep ────────────────────────────────────────────────────────────────────

class SleepEntryBase(SQLModel):
    bedtime: str  # HH:MM
    wakeup_time: str  # HH:MM
    date: Date = Field(index=True)  # the night of (date you went to sleep)
    quality: Optional[SleepQuality] = None
    notes: Optional[str] = None

    @field_validator("bedtime", "wakeup_time")
    @classmethod
    def _check_clock(cls, value: str) -> str:
        return normalize_clock(value)


class SleepEntry(SleepEntryBase, table=True):
    """One sleep session, dated by the evening it started."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class SleepEntryCreate(SleepEntryBase):
    user_id: int


class SleepEntryRead(SleepEntryBase):
    id: uuid.UUID
    user_id: int
    created_at: Optional[datetime] = None


class SleepEntryUpdate(SQLModel):
    bedtime: Optional[str] = None
    wakeup_time: Optional[str] = None
    date: Optional[Date] = None
    quality: Optional[SleepQuality] = None
    notes: Optional[str] = None

    @field_validator("bedtime", "wakeup_time")
    @classmethod
    def _check_clock(cls, value: Optional[str]) -> Optional[str]:
        return _optional_clock(value)


def partial_changes(update: SQLModel, target: Type[SQLModel]) -> Dict[str, Any]:
    """
    Fields explicitly sent in a partial update, ready to apply to `target`.

    An explicit null is kept only where the target field is optional
    (e.g. clearing notes); on required fields it is ignored.
    """
    fields = target.model_fields
    return {
        key: value
        for key, value in update.model_dump(exclude_unset=True).items()
        if value is not None or (key in fields and not fields[key].is_required())
    }

"""Per-user settings: body height, daily goals, display units and reminders."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from healthtrack.analysis.sleep import normalize_clock
from healthtrack.analysis.units import HeightUnit, WeightUnit, convert_height, require_finite


class UserSettingsBase(SQLModel):
    height: float = Field(default=175.0, gt=0)  # in height_unit
    water_goal: float = Field(default=2.5, gt=0)  # liters per day
    sleep_goal: float = Field(default=8.0, gt=0)  # hours per night
    weight_unit: WeightUnit = WeightUnit.KG
    height_unit: HeightUnit = HeightUnit.CM
    reminder_enabled: bool = True
    reminder_time: str = "07:00"  # HH:MM, local to Settings.reminder_timezone
    dark_mode: bool = False

    @field_validator("height", "water_goal", "sleep_goal")
    @classmethod
    def _check_finite(cls, value):
        return require_finite(value)

    @field_validator("reminder_time")
    @classmethod
    def _check_reminder_time(cls, value: str) -> str:
        return normalize_clock(value)


class UserSettings(UserSettingsBase, table=True):
    """Created once on first use, then only ever updated."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class UserSettingsCreate(UserSettingsBase):
    pass


class UserSettingsRead(UserSettingsBase):
    id: Optional[int] = None
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserSettingsUpdate(SQLModel):
    height: Optional[float] = Field(default=None, gt=0)
    water_goal: Optional[float] = Field(default=None, gt=0)
    sleep_goal: Optional[float] = Field(default=None, gt=0)
    weight_unit: Optional[WeightUnit] = None
    height_unit: Optional[HeightUnit] = None
    reminder_enabled: Optional[bool] = None
    reminder_time: Optional[str] = None
    dark_mode: Optional[bool] = None

    @field_validator("height", "water_goal", "sleep_goal")
    @classmethod
    def _check_finite(cls, value):
        return require_finite(value)

    @field_validator("reminder_time")
    @classmethod
    def _check_reminder_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return normalize_clock(value)


def settings_changes(current, update: UserSettingsUpdate) -> Dict[str, Any]:
    """
    Resolve a partial settings update against the current settings.

    A height-unit change without an explicit height converts the stored
    height into the new unit, so the body measurement itself never changes.
    """
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    new_unit = changes.get("height_unit")
    if new_unit is not None and "height" not in changes and new_unit != current.height_unit:
        changes["height"] = convert_height(current.height, current.height_unit, new_unit)
    return changes

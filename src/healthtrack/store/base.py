"""
Repository protocol shared by the remote (REST API) and local (JSON file)
stores, plus the entry-kind table both of them dispatch on.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Protocol, Type, runtime_checkable

from sqlmodel import SQLModel

from healthtrack.models.entries import (
    SleepEntryBase,
    SleepEntryRead,
    SleepEntryUpdate,
    WaterEntryBase,
    WaterEntryRead,
    WaterEntryUpdate,
    WeightEntryBase,
    WeightEntryRead,
    WeightEntryUpdate,
)
from healthtrack.models.settings import UserSettingsRead, UserSettingsUpdate
from healthtrack.models.snapshot import HealthData


class RepositoryError(Exception):
    """The backing store rejected a request."""


class RepositoryUnavailable(RepositoryError):
    """The backing store could not be reached at all."""


class EntryKind(str, Enum):
    WEIGHT = "weight"
    WATER = "water"
    SLEEP = "sleep"


@dataclass(frozen=True)
class EntrySchema:
    """How one entry kind is named and typed on each side of the wire."""

    base: Type[SQLModel]
    read: Type[SQLModel]
    update: Type[SQLModel]
    api_path: str  # e.g. "weight-entries"
    snapshot_field: str  # attribute on HealthData


ENTRY_SCHEMAS: Dict[EntryKind, EntrySchema] = {
    EntryKind.WEIGHT: EntrySchema(
        WeightEntryBase, WeightEntryRead, WeightEntryUpdate, "weight-entries", "weights"
    ),
    EntryKind.WATER: EntrySchema(
        WaterEntryBase, WaterEntryRead, WaterEntryUpdate, "water-entries", "water_intake"
    ),
    EntryKind.SLEEP: EntrySchema(
        SleepEntryBase, SleepEntryRead, SleepEntryUpdate, "sleep-entries", "sleep_entries"
    ),
}


def sort_key(entry):
    """Oldest first; same-day entries by time of day, then creation time."""
    return (entry.date, getattr(entry, "time", ""), entry.created_at or datetime.min)


@runtime_checkable
class HealthRepository(Protocol):
    """
    One user's health data, wherever it lives.

    Entry lists come back oldest date first. Update and delete report a
    missing id as None / False rather than raising.
    """

    user_id: int

    def list_entries(self, kind: EntryKind) -> List[SQLModel]:
        ...

    def add_entry(self, kind: EntryKind, entry: SQLModel) -> SQLModel:
        ...

    def update_entry(
        self, kind: EntryKind, entry_id: uuid.UUID, changes: SQLModel
    ) -> Optional[SQLModel]:
        ...

    def delete_entry(self, kind: EntryKind, entry_id: uuid.UUID) -> bool:
        ...

    def get_settings(self) -> UserSettingsRead:
        ...

    def save_settings(self, update: UserSettingsUpdate) -> UserSettingsRead:
        ...

    def snapshot(self) -> HealthData:
        ...

"""
LocalRepository: HealthRepository backed by one JSON document on disk.

The offline counterpart of RemoteRepository. A missing or unreadable file
reads as an empty HealthData with default settings.
"""
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import List

from pydantic import ValidationError

from healthtrack.models.entries import partial_changes
from healthtrack.models.settings import UserSettingsRead, UserSettingsUpdate, settings_changes
from healthtrack.models.snapshot import HealthData
from healthtrack.store.base import ENTRY_SCHEMAS, EntryKind, sort_key

logger = logging.getLogger(__name__)


class LocalRepository:
    """Every call reloads the file, so several processes see each other's writes."""

    def __init__(self, path: Path, user_id: int = 1):
        self.path = Path(path).expanduser()
        self.user_id = user_id

    def load(self) -> HealthData:
        if not self.path.exists():
            return HealthData.empty(self.user_id)
        try:
            return HealthData.model_validate_json(self.path.read_bytes())
        except (ValidationError, UnicodeDecodeError) as exc:
            logger.error("Could not parse %s, starting from defaults: %s", self.path, exc)
            return HealthData.empty(self.user_id)

    def save(self, data: HealthData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(data.model_dump_json(indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def clear(self) -> None:
        """Forget everything stored locally."""
        self.path.unlink(missing_ok=True)

    # ─── Entries ─────────────────────────────────────────────────────────────

    def list_entries(self, kind: EntryKind) -> List:
        return getattr(self.load(), ENTRY_SCHEMAS[kind].snapshot_field)

    def add_entry(self, kind: EntryKind, entry):
        schema = ENTRY_SCHEMAS[kind]
        record = schema.read.model_validate(
            {
                **entry.model_dump(),
                "id": uuid.uuid4(),
                "user_id": self.user_id,
                "created_at": datetime.utcnow(),
            }
        )
        data = self.load()
        entries = getattr(data, schema.snapshot_field)
        entries.append(record)
        entries.sort(key=sort_key)
        self.save(data)
        return record

    def update_entry(self, kind: EntryKind, entry_id: uuid.UUID, changes):
        schema = ENTRY_SCHEMAS[kind]
        data = self.load()
        entries = getattr(data, schema.snapshot_field)
        for i, existing in enumerate(entries):
            if existing.id == entry_id:
                updated = schema.read.model_validate(
                    {**existing.model_dump(), **partial_changes(changes, schema.read)}
                )
                entries[i] = updated
                entries.sort(key=sort_key)
                self.save(data)
                return updated
        return None

    def delete_entry(self, kind: EntryKind, entry_id: uuid.UUID) -> bool:
        schema = ENTRY_SCHEMAS[kind]
        data = self.load()
        entries = getattr(data, schema.snapshot_field)
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        setattr(data, schema.snapshot_field, kept)
        self.save(data)
        return True

    # ─── Settings ────────────────────────────────────────────────────────────

    def get_settings(self) -> UserSettingsRead:
        return self.load().settings

    def save_settings(self, update: UserSettingsUpdate) -> UserSettingsRead:
        data = self.load()
        current = data.settings
        now = datetime.utcnow()
        data.settings = UserSettingsRead.model_validate(
            {
                **current.model_dump(),
                **settings_changes(current, update),
                "created_at": current.created_at or now,
                "updated_at": now,
            }
        )
        self.save(data)
        return data.settings

    def snapshot(self) -> HealthData:
        return self.load()

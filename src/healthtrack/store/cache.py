"""
HealthDataStore: cached mirror of one user's four collections.

Reads are served from the cache; every mutation goes straight to the
repository and invalidates only the collection it touched, so the next
read refetches it. The repository is picked once, by availability, in
open_repository().
"""
import logging
import uuid
from datetime import date
from typing import Dict, List, Optional

from healthtrack.analysis.summary import DailySummary, build_daily_summary
from healthtrack.config import Settings
from healthtrack.models.settings import UserSettingsRead, UserSettingsUpdate
from healthtrack.models.snapshot import HealthData
from healthtrack.store.base import EntryKind, HealthRepository, RepositoryError
from healthtrack.store.local import LocalRepository
from healthtrack.store.remote import RemoteRepository

logger = logging.getLogger(__name__)

_SETTINGS = "settings"


def open_repository(settings: Settings, client=None) -> HealthRepository:
    """
    Use the REST API when it answers its health check, else the local file.

    Args:
        settings: app settings (api_base_url, api_timeout_seconds,
            local_store_path, user_id).
        client: optional pre-built httpx.Client for the remote side.
    """
    remote = RemoteRepository(
        base_url=settings.api_base_url,
        user_id=settings.user_id,
        timeout=settings.api_timeout_seconds,
        client=client,
    )
    try:
        remote.ping()
    except RepositoryError as exc:
        logger.warning(
            "API unavailable (%s); using local store at %s", exc, settings.local_store_path
        )
        remote.close()
        return LocalRepository(settings.local_store_path, user_id=settings.user_id)
    logger.info("Using HealthTrack API at %s", settings.api_base_url)
    return remote


class HealthDataStore:
    def __init__(self, repository: HealthRepository):
        self.repository = repository
        self._cache: Dict[str, object] = {}

    @property
    def user_id(self) -> int:
        return self.repository.user_id

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one cached collection, or everything when key is None."""
        if key is None:
            self._cache.clear()
        else:
            self._cache.pop(key, None)

    # ─── Reads ───────────────────────────────────────────────────────────────

    def entries(self, kind: EntryKind) -> List:
        if kind.value not in self._cache:
            self._cache[kind.value] = self.repository.list_entries(kind)
        return self._cache[kind.value]

    @property
    def settings(self) -> UserSettingsRead:
        if _SETTINGS not in self._cache:
            self._cache[_SETTINGS] = self.repository.get_settings()
        return self._cache[_SETTINGS]

    def snapshot(self) -> HealthData:
        return HealthData(
            user_id=self.user_id,
            weights=self.entries(EntryKind.WEIGHT),
            water_intake=self.entries(EntryKind.WATER),
            sleep_entries=self.entries(EntryKind.SLEEP),
            settings=self.settings,
        )

    def summary(self, on_date: Optional[date] = None) -> DailySummary:
        return build_daily_summary(
            weights=self.entries(EntryKind.WEIGHT),
            water=self.entries(EntryKind.WATER),
            sleep=self.entries(EntryKind.SLEEP),
            settings=self.settings,
            on_date=on_date or date.today(),
        )

    # ─── Mutations ───────────────────────────────────────────────────────────

    def add(self, kind: EntryKind, entry):
        try:
            return self.repository.add_entry(kind, entry)
        finally:
            self.invalidate(kind.value)

    def update(self, kind: EntryKind, entry_id: uuid.UUID, changes):
        try:
            return self.repository.update_entry(kind, entry_id, changes)
        finally:
            self.invalidate(kind.value)

    def delete(self, kind: EntryKind, entry_id: uuid.UUID) -> bool:
        try:
            return self.repository.delete_entry(kind, entry_id)
        finally:
            self.invalidate(kind.value)

    def save_settings(self, update: UserSettingsUpdate) -> UserSettingsRead:
        try:
            return self.repository.save_settings(update)
        finally:
            self.invalidate(_SETTINGS)

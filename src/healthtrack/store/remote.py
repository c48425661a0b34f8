"""
RemoteRepository: HealthRepository backed by the HealthTrack REST API.

Uses a synchronous httpx.Client. Any httpx.Client works, including
FastAPI's TestClient, which lets the tests drive the real app in-process.
"""
import logging
import uuid
from typing import List, Optional

import httpx

from healthtrack.models.settings import (
    UserSettingsCreate,
    UserSettingsRead,
    UserSettingsUpdate,
    settings_changes,
)
from healthtrack.models.snapshot import HealthData
from healthtrack.store.base import (
    ENTRY_SCHEMAS,
    EntryKind,
    RepositoryError,
    RepositoryUnavailable,
)

logger = logging.getLogger(__name__)


class RemoteRepository:
    """Thin typed wrapper over the /api routes for one user."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        user_id: int = 1,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            base_url: API root (without the /api prefix).
            user_id: owner of every entry read or written.
            timeout: per-request timeout in seconds.
            client: pre-built httpx.Client; overrides base_url and timeout.
        """
        self.user_id = user_id
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise RepositoryUnavailable(f"{method} {path}: {exc}") from exc

    @staticmethod
    def _check(response: httpx.Response) -> httpx.Response:
        if response.is_error:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            raise RepositoryError(
                f"{response.request.method} {response.request.url.path} "
                f"failed with {response.status_code}: {detail}"
            )
        return response

    def ping(self) -> None:
        """Raise RepositoryUnavailable / RepositoryError unless the API is healthy."""
        self._check(self._request("GET", "/api/health"))

    # ─── Entries ─────────────────────────────────────────────────────────────

    def list_entries(self, kind: EntryKind) -> List:
        schema = ENTRY_SCHEMAS[kind]
        resp = self._check(
            self._request("GET", f"/api/users/{self.user_id}/{schema.api_path}")
        )
        return [schema.read.model_validate(item) for item in resp.json()]

    def add_entry(self, kind: EntryKind, entry):
        schema = ENTRY_SCHEMAS[kind]
        payload = entry.model_dump(mode="json")
        payload["user_id"] = self.user_id
        resp = self._check(self._request("POST", f"/api/{schema.api_path}", json=payload))
        return schema.read.model_validate(resp.json())

    def update_entry(self, kind: EntryKind, entry_id: uuid.UUID, changes):
        schema = ENTRY_SCHEMAS[kind]
        resp = self._request(
            "PUT",
            f"/api/{schema.api_path}/{entry_id}",
            json=changes.model_dump(mode="json", exclude_unset=True),
        )
        if resp.status_code == 404:
            return None
        return schema.read.model_validate(self._check(resp).json())

    def delete_entry(self, kind: EntryKind, entry_id: uuid.UUID) -> bool:
        schema = ENTRY_SCHEMAS[kind]
        resp = self._request("DELETE", f"/api/{schema.api_path}/{entry_id}")
        if resp.status_code == 404:
            return False
        self._check(resp)
        return True

    # ─── Settings ────────────────────────────────────────────────────────────

    def get_settings(self) -> UserSettingsRead:
        """Saved settings, or the defaults if the user never saved any."""
        resp = self._request("GET", f"/api/users/{self.user_id}/settings")
        if resp.status_code == 404:
            return UserSettingsRead(user_id=self.user_id)
        return UserSettingsRead.model_validate(self._check(resp).json())

    def save_settings(self, update: UserSettingsUpdate) -> UserSettingsRead:
        path = f"/api/users/{self.user_id}/settings"
        resp = self._request("PUT", path, json=update.model_dump(mode="json", exclude_unset=True))
        if resp.status_code == 404:
            # First save for this user: create from defaults plus the update
            logger.info("No settings for user %d yet; creating them", self.user_id)
            create = UserSettingsCreate.model_validate(
                settings_changes(UserSettingsRead(user_id=self.user_id), update)
            )
            resp = self._request("POST", path, json=create.model_dump(mode="json"))
        return UserSettingsRead.model_validate(self._check(resp).json())

    def snapshot(self) -> HealthData:
        return HealthData(
            user_id=self.user_id,
            weights=self.list_entries(EntryKind.WEIGHT),
            water_intake=self.list_entries(EntryKind.WATER),
            sleep_entries=self.list_entries(EntryKind.SLEEP),
            settings=self.get_settings(),
        )

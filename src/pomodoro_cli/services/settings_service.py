"""Settings store: local cache first, backend on top for signed-in users.

``merge`` reconciles the two sources and is independent of I/O. The store
loads once at startup and writes through on every update: the local cache
always, the backend only when a user is signed in.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
from platformdirs import user_data_dir
from pydantic import ValidationError

from pomodoro_cli.models.settings import Settings, from_remote, to_remote
from pomodoro_cli.models.user import User
from pomodoro_cli.services.api.client import APIClient
from pomodoro_cli.services.api.settings import SettingsAPI
from pomodoro_cli.utils.logger import get_logger

CACHE_KEY = "userSettings"


class SettingsSyncError(Exception):
    """Saving settings to the backend failed. The local cache is already updated."""


def merge(
    local: Settings, remote: dict[str, Any] | None, user_id: str | None = None
) -> Settings:
    """Overlay a backend settings row onto local settings.

    Every field present in *remote* wins over the local value; fields the
    backend omits (or sends as null) keep the local value. ``id`` comes from
    the backend row and ``user_id`` from the signed-in identity.
    """
    data = local.model_dump(by_alias=True)
    if remote is not None:
        data.update(from_remote(remote))
        if remote.get("id") is not None:
            data["id"] = str(remote["id"])
    if user_id:
        data["user_id"] = user_id
    return Settings.model_validate(data)


class LocalSettingsCache:
    """A single JSON blob stored under a fixed key in the user data dir."""

    def __init__(self, cache_dir: Path | None = None, key: str = CACHE_KEY):
        if cache_dir is None:
            cache_dir = Path(user_data_dir("pomodoro_cli"))
        self.cache_dir = cache_dir
        self.key = key
        self.path = cache_dir / f"{key}.json"

    def read(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, blob: str) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(blob, encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class SettingsStore:
    """In-memory settings backed by the local cache and, if signed in, the backend."""

    def __init__(
        self,
        cache: LocalSettingsCache,
        *,
        user: User | None = None,
        client_factory: Callable[[], APIClient] | None = None,
    ):
        self.cache = cache
        self.user = user
        self._client_factory = client_factory or APIClient
        self._settings = Settings()
        self.loading = True
        self._listeners: list[Callable[[Settings], None]] = []
        self._logger = get_logger("settings")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_remote(self) -> bool:
        """Whether updates are also written to the backend."""
        return self.user is not None

    def subscribe(self, listener: Callable[[Settings], None]) -> None:
        """Call *listener* with the new settings whenever they change."""
        self._listeners.append(listener)

    def _set(self, settings: Settings) -> None:
        self._settings = settings
        for listener in list(self._listeners):
            listener(settings)

    def read_local(self) -> Settings:
        """Settings from the local cache, or defaults if missing or unreadable.

        A cache that parses but carries invalid fields keeps every field
        that validates on its own; the others fall back to defaults.
        """
        try:
            blob = self.cache.read()
        except (OSError, UnicodeDecodeError) as e:
            self._logger.warning("discarding unreadable settings cache: %s", e)
            return Settings()
        if blob is None:
            return Settings()
        try:
            return Settings.model_validate_json(blob)
        except ValidationError as e:
            self._logger.warning("settings cache has invalid fields: %s", e)
        return self._salvage(blob)

    def _salvage(self, blob: str) -> Settings:
        try:
            data = json.loads(blob)
        except ValueError:
            data = None
        if not isinstance(data, dict):
            self._logger.warning("discarding unreadable settings cache")
            return Settings()

        kept: dict[str, Any] = {}
        for key, value in data.items():
            try:
                Settings.model_validate({key: value})
            except ValidationError:
                self._logger.warning("dropping invalid cached setting '%s'", key)
                continue
            kept[key] = value
        return Settings.model_validate(kept)

    async def fetch_remote(self) -> dict[str, Any]:
        async with self._client_factory() as client:
            row = await SettingsAPI(client).get_settings()
        if not isinstance(row, dict):
            raise ValueError("settings response is not an object")
        return row

    async def load(self) -> Settings:
        """Load settings: local cache, overlaid with the backend when signed in."""
        self.loading = True
        try:
            local = self.read_local()
            settings = local
            if self.user is not None:
                try:
                    remote = await self.fetch_remote()
                    settings = merge(local, remote, user_id=self.user.id)
                except (httpx.HTTPError, ValueError) as e:
                    self._logger.warning(
                        "remote settings unavailable, using local settings: %s", e
                    )
            self._set(settings)
            self.cache.write(settings.to_cache())
            return settings
        finally:
            self.loading = False

    async def update(self, partial: dict[str, Any]) -> Settings:
        """Merge *partial* into the settings and persist it.

        Raises:
            pydantic.ValidationError: *partial* produces invalid settings;
                nothing is changed.
            SettingsSyncError: the backend write failed; the in-memory
                settings and local cache keep the new values.
        """
        settings = self._settings.apply(partial)
        self._set(settings)
        self.cache.write(settings.to_cache())

        if self.user is not None:
            try:
                async with self._client_factory() as client:
                    await SettingsAPI(client).update_settings(to_remote(settings))
            except (httpx.HTTPError, ValueError) as e:
                self._logger.error("saving settings to backend failed: %s", e)
                raise SettingsSyncError(
                    f"Settings were saved locally but could not be synced: {e}"
                ) from e
        return settings

    async def reset(self) -> Settings:
        """Restore default preferences, keeping the session log."""
        defaults = Settings().model_dump(exclude={"id", "user_id", "sessions"})
        return await self.update(defaults)

"""Tests for the settings store, its local cache and the merge rule."""

from __future__ import annotations

import json
from datetime import date

import httpx
import pytest
from pydantic import ValidationError

from pomodoro_cli.models.settings import SessionEntry, Settings
from pomodoro_cli.models.user import User
from pomodoro_cli.services.settings_service import (
    LocalSettingsCache,
    SettingsStore,
    SettingsSyncError,
    merge,
)

REMOTE_ROW = {
    "id": 5,
    "user_id": 1,
    "global_theme": "light",
    "pomodoro_color": "#111111",
    "short_break_color": "#222222",
    "long_break_color": "#333333",
    "times": {"pomodoro": 50, "shortBreak": 10, "longBreak": 20},
    "sessions": [{"date": "2026-10-18", "count": 3}],
    "auto_start_breaks": True,
    "auto_delete_completed_tasks": False,
}


@pytest.fixture()
def user() -> User:
    return User(id="u1", display_name="Ada")


@pytest.fixture()
def remote_store(cache, user, client_factory) -> SettingsStore:
    return SettingsStore(cache, user=user, client_factory=client_factory)


# ---------------------------------------------------------------------------
# merge
# ---------------------------------------------------------------------------


class TestMerge:
    def test_no_remote_returns_local(self):
        local = Settings(pomodoro_color="#000")
        assert merge(local, None) == local

    def test_remote_fields_win(self):
        merged = merge(Settings(), REMOTE_ROW, user_id="u1")
        assert merged.global_theme == "light"
        assert merged.pomodoro_color == "#111111"
        assert merged.times.pomodoro == 50
        assert merged.sessions == [SessionEntry(date=date(2026, 10, 18), count=3)]
        assert merged.auto_start_breaks is True

    def test_identifiers(self):
        merged = merge(Settings(), REMOTE_ROW, user_id="u1")
        assert merged.id == "5"
        assert merged.user_id == "u1"

    def test_missing_and_null_fields_keep_local(self):
        local = Settings(pomodoro_color="#000", global_theme="system")
        merged = merge(local, {"pomodoro_color": None, "auto_start_breaks": True})
        assert merged.pomodoro_color == "#000"
        assert merged.global_theme == "system"
        assert merged.auto_start_breaks is True

    def test_invalid_remote_raises(self):
        with pytest.raises(ValidationError):
            merge(Settings(), {"times": {"pomodoro": 0}})


# ---------------------------------------------------------------------------
# LocalSettingsCache
# ---------------------------------------------------------------------------


class TestLocalSettingsCache:
    def test_read_missing(self, cache):
        assert cache.read() is None

    def test_write_read(self, cache):
        cache.write('{"a": 1}')
        assert cache.read() == '{"a": 1}'
        assert cache.path.name == "userSettings.json"
        assert oct(cache.path.stat().st_mode & 0o777) == "0o600"

    def test_clear(self, cache):
        cache.write("{}")
        cache.clear()
        assert cache.read() is None
        cache.clear()

    def test_custom_key(self, tmp_path):
        other = LocalSettingsCache(tmp_path, key="other")
        other.write("{}")
        assert (tmp_path / "other.json").exists()


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    @pytest.mark.asyncio
    async def test_signed_out_uses_defaults_and_writes_cache(self, cache, backend):
        store = SettingsStore(cache)
        assert store.loading is True

        settings = await store.load()

        assert settings == Settings()
        assert store.loading is False
        assert store.is_remote is False
        assert json.loads(cache.read())["pomodoroColor"] == "#ef4444"
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_signed_out_reads_cache(self, cache):
        cache.write(Settings(pomodoro_color="#000").to_cache())
        settings = await SettingsStore(cache).load()
        assert settings.pomodoro_color == "#000"

    @pytest.mark.asyncio
    async def test_malformed_cache_falls_back_to_defaults(self, cache):
        cache.write("{not json")
        settings = await SettingsStore(cache).load()
        assert settings == Settings()
        assert Settings.model_validate_json(cache.read()) == Settings()

    @pytest.mark.asyncio
    async def test_undecodable_cache_falls_back_to_defaults(self, cache):
        cache.cache_dir.mkdir(parents=True, exist_ok=True)
        cache.path.write_bytes(b"\xff\xfe{not json")

        store = SettingsStore(cache)
        settings = await store.load()

        assert settings == Settings()
        assert store.loading is False
        assert Settings.model_validate_json(cache.read()) == Settings()

    @pytest.mark.asyncio
    async def test_invalid_field_keeps_the_rest_of_the_cache(self, cache):
        cache.write(
            json.dumps(
                {
                    "globalTheme": "blue",
                    "pomodoroColor": "#000",
                    "times": {"pomodoro": 90, "shortBreak": 5, "longBreak": 15},
                    "sessions": [{"date": "2026-10-18", "count": 7}],
                }
            )
        )

        settings = await SettingsStore(cache).load()

        assert settings.global_theme == "dark"
        assert settings.times.pomodoro == 25
        assert settings.pomodoro_color == "#000"
        assert settings.sessions == [SessionEntry(date=date(2026, 10, 18), count=7)]
        assert json.loads(cache.read())["sessions"] == [
            {"date": "2026-10-18", "count": 7}
        ]

    @pytest.mark.asyncio
    async def test_cache_that_is_not_an_object_falls_back_to_defaults(self, cache):
        cache.write("[1, 2, 3]")
        settings = await SettingsStore(cache).load()
        assert settings == Settings()

    @pytest.mark.asyncio
    async def test_signed_in_merges_remote(self, remote_store, backend, cache):
        cache.write(Settings(pomodoro_color="#000").to_cache())
        backend.on("GET", "/settings", data=REMOTE_ROW)

        settings = await remote_store.load()

        assert settings.pomodoro_color == "#111111"
        assert settings.user_id == "u1"
        assert remote_store.is_remote is True
        assert json.loads(cache.read())["pomodoroColor"] == "#111111"

    @pytest.mark.asyncio
    async def test_remote_partial_row_keeps_local_fields(self, remote_store, backend, cache):
        cache.write(Settings(long_break_color="#abcdef").to_cache())
        backend.on("GET", "/settings", data={"id": 5, "global_theme": "light"})

        settings = await remote_store.load()

        assert settings.global_theme == "light"
        assert settings.long_break_color == "#abcdef"

    @pytest.mark.asyncio
    async def test_remote_failure_keeps_local(self, remote_store, backend, cache):
        cache.write(Settings(pomodoro_color="#000").to_cache())
        backend.on("GET", "/settings", status=500, data={"error": "down"})

        settings = await remote_store.load()

        assert settings.pomodoro_color == "#000"
        assert remote_store.loading is False

    @pytest.mark.asyncio
    async def test_unreachable_backend_keeps_local(self, remote_store, backend):
        backend.fail("GET", "/settings", httpx.ConnectError("refused"))
        settings = await remote_store.load()
        assert settings == Settings()

    @pytest.mark.asyncio
    async def test_unexpected_body_keeps_local(self, remote_store, backend):
        backend.on("GET", "/settings", data=[1, 2, 3])
        settings = await remote_store.load()
        assert settings == Settings()


# ---------------------------------------------------------------------------
# Updating
# ---------------------------------------------------------------------------


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_persists_across_reload(self, store, cache):
        await store.update({"pomodoro_color": "#000"})

        reloaded = SettingsStore(cache)
        settings = await reloaded.load()

        assert settings.pomodoro_color == "#000"

    @pytest.mark.asyncio
    async def test_signed_out_makes_no_requests(self, store, backend):
        await store.update({"auto_start_breaks": True})
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_signed_in_puts_snake_case_row(self, remote_store, backend):
        backend.on("GET", "/settings", data={})
        backend.on("PUT", "/settings", data={})
        await remote_store.load()

        await remote_store.update({"autoStartBreaks": True})

        sent = backend.sent_json("PUT", "/settings")
        assert sent["auto_start_breaks"] is True
        assert sent["times"] == {"pomodoro": 25, "shortBreak": 5, "longBreak": 15}
        assert "autoStartBreaks" not in sent

    @pytest.mark.asyncio
    async def test_remote_failure_raises_after_local_write(self, remote_store, backend, cache):
        backend.on("PUT", "/settings", status=500, data={"error": "down"})

        with pytest.raises(SettingsSyncError):
            await remote_store.update({"pomodoro_color": "#000"})

        assert remote_store.settings.pomodoro_color == "#000"
        assert json.loads(cache.read())["pomodoroColor"] == "#000"

    @pytest.mark.asyncio
    async def test_non_json_put_response_raises_sync_error(self, remote_store, backend):
        backend.respond(
            "PUT",
            "/settings",
            httpx.Response(200, headers={"content-type": "text/html"}, content=b"<ok>"),
        )

        with pytest.raises(SettingsSyncError):
            await remote_store.update({"auto_start_breaks": True})

        assert remote_store.settings.auto_start_breaks is True

    @pytest.mark.asyncio
    async def test_invalid_update_changes_nothing(self, store, cache):
        await store.update({"pomodoro_color": "#000"})
        with pytest.raises(ValidationError):
            await store.update({"times": {"pomodoro": 61}})
        assert store.settings.times.pomodoro == 25
        assert json.loads(cache.read())["times"]["pomodoro"] == 25

    @pytest.mark.asyncio
    async def test_reset_keeps_sessions(self, store):
        entry = SessionEntry(date=date(2026, 10, 19), count=2)
        await store.update({"sessions": [entry], "pomodoro_color": "#000"})

        settings = await store.reset()

        assert settings.pomodoro_color == "#ef4444"
        assert settings.sessions == [entry]

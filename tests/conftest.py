"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/API state.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import date

import httpx
import pytest

from pomodoro_cli.models.focus.scheduler import PollingScheduler
from pomodoro_cli.services.api.client import APIClient
from pomodoro_cli.services.settings_service import LocalSettingsCache, SettingsStore


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Point platformdirs lookups at *tmp_path* and clear the cached ConfigService."""
    from pomodoro_cli.services.config_service import get_config_service

    monkeypatch.setattr(
        "pomodoro_cli.utils.logger.user_log_dir", lambda *_: str(tmp_path / "logs")
    )
    monkeypatch.setattr(
        "pomodoro_cli.services.config_service.user_config_dir",
        lambda *_: str(tmp_path / "config"),
    )
    monkeypatch.setattr(
        "pomodoro_cli.services.config_service.user_data_dir",
        lambda *_: str(tmp_path / "data"),
    )
    monkeypatch.delenv("POMODORO_API_URL", raising=False)
    get_config_service.cache_clear()
    yield
    get_config_service.cache_clear()


@pytest.fixture()
def config_service():
    """A real ConfigService in the isolated dirs, with retries disabled."""
    from pomodoro_cli.services.config_service import ConfigService

    svc = ConfigService()
    svc.load_config()
    svc.config.api.endpoint = "https://api.example.com"
    svc.config.api.retry = 0
    return svc


@pytest.fixture()
def cache(tmp_path) -> LocalSettingsCache:
    return LocalSettingsCache(tmp_path / "cache")


# ---------------------------------------------------------------------------
# Deterministic time
# ---------------------------------------------------------------------------


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler(clock) -> PollingScheduler:
    return PollingScheduler(clock=clock)


@pytest.fixture()
def advance(clock, scheduler) -> Callable[[float], None]:
    """Move time forward one second at a time, firing due callbacks."""

    def _advance(seconds: float) -> None:
        whole = int(seconds)
        for _ in range(whole):
            clock.advance(1)
            scheduler.run_pending()
        rest = seconds - whole
        if rest:
            clock.advance(rest)
            scheduler.run_pending()

    return _advance


@pytest.fixture()
def fixed_today() -> date:
    return date(2026, 10, 19)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def json_response(status_code: int = 200, data=None) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        headers={"content-type": "application/json"},
        content=json.dumps(data if data is not None else {}).encode(),
    )


class FakeBackend:
    """Routes requests to canned responses and records what was sent."""

    def __init__(self):
        self.routes: dict[
            tuple[str, str], tuple[int, object] | Exception | httpx.Response
        ] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, data=None):
        self.routes[(method, path)] = (status, data)

    def fail(self, method: str, path: str, error: Exception):
        self.routes[(method, path)] = error

    def respond(self, method: str, path: str, response: httpx.Response):
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.routes.get((request.method, request.url.path))
        if result is None:
            return json_response(404, {"error": "not found"})
        if isinstance(result, Exception):
            raise result
        if isinstance(result, httpx.Response):
            return result
        status, data = result
        return json_response(status, data)

    def sent_json(self, method: str, path: str) -> dict:
        for request in reversed(self.requests):
            if request.method == method and request.url.path == path:
                return json.loads(request.content)
        raise AssertionError(f"no {method} {path} request was sent")


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def client_factory(config_service, backend) -> Callable[[], APIClient]:
    """Builds APIClients whose httpx client talks to the fake backend."""

    def _factory() -> APIClient:
        client = APIClient(config_service)
        client._client = httpx.AsyncClient(
            base_url=client.base_url,
            transport=httpx.MockTransport(backend.handler),
            cookies=client._get_cookies(),
        )
        return client

    return _factory


# ---------------------------------------------------------------------------
# Settings store
# ---------------------------------------------------------------------------


@pytest.fixture()
def store(cache) -> SettingsStore:
    """A signed-out store over the temporary cache, already loaded with defaults."""
    settings_store = SettingsStore(cache)
    settings_store.loading = False
    return settings_store

"""HTTP client for the Pomodoro settings backend."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from pomodoro_cli.services.config_service import ConfigService, get_config_service
from pomodoro_cli.utils.logger import get_logger

BACKOFF_BASE_SECONDS = 1


def _is_retryable(error: httpx.HTTPError) -> bool:
    """Server errors and transport failures are retried, client errors are not."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return isinstance(error, httpx.RequestError)


class APIClient:
    """Async HTTP client authenticated by the backend session cookie."""

    def __init__(self, config_service: ConfigService | None = None):
        self.config_manager = config_service or get_config_service()
        self.config = self.config_manager.config
        self.base_url = self.config_manager.get_api_endpoint()
        self.timeout = self.config.api.timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> APIClient:
        """Enter the async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the async context manager and ensure the client is closed."""
        await self.close()

    def _get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _get_cookies(self) -> dict[str, str]:
        """Session cookie for the backend, if signed in."""
        credentials = self.config_manager.load_credentials()
        if not credentials:
            return {}
        return {self.config.auth.cookie_name: credentials["session_cookie"]}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                headers=self._get_headers(),
                cookies=self._get_cookies(),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry: int | None = None,
    ) -> httpx.Response:
        """Send a request, retrying 5xx responses and transport errors.

        4xx responses raise ``httpx.HTTPStatusError`` at once. After the
        last attempt the final error is raised.
        """
        attempts = 1 + (self.config.api.retry if retry is None else retry)
        client = await self._get_client()
        url = path if path.startswith("/") else f"/{path}"

        for attempt in range(1, attempts + 1):
            try:
                response = await client.request(method, url, json=json, params=params)
                response.raise_for_status()
                return response
            except httpx.HTTPError as e:
                if not _is_retryable(e) or attempt == attempts:
                    raise
                get_logger("api").debug(
                    "%s %s failed (attempt %d/%d): %s", method, url, attempt, attempts, e
                )
            await asyncio.sleep(BACKOFF_BASE_SECONDS * 2 ** (attempt - 1))

        raise RuntimeError(f"no attempts made for {method} {url}")

    async def get(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def post(
        self, path: str, *, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, json=json)

    async def put(
        self, path: str, *, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Make a PUT request."""
        return await self.request("PUT", path, json=json)

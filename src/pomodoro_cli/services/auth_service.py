"""Service for handling authentication-related operations."""

from __future__ import annotations

from collections.abc import Callable

import httpx

from pomodoro_cli.models.user import User
from pomodoro_cli.services.api.auth import AuthAPI
from pomodoro_cli.services.api.client import APIClient
from pomodoro_cli.services.config_service import ConfigService, get_config_service
from pomodoro_cli.utils.logger import get_logger


class AuthService:
    """Resolves the signed-in user and manages the stored session cookie."""

    def __init__(
        self,
        config_service: ConfigService | None = None,
        client_factory: Callable[[], APIClient] | None = None,
    ):
        self.config_service = config_service or get_config_service()
        self._client_factory = client_factory or (
            lambda: APIClient(self.config_service)
        )

    def is_authenticated(self) -> bool:
        """Whether a session cookie is stored (not whether it is still valid)."""
        return self.config_service.load_credentials() is not None

    async def resolve_identity(self) -> User | None:
        """Return the signed-in user, or None.

        Any failure (no cookie, network error, 401, unexpected body) means
        "not signed in" and is only logged.
        """
        if not self.is_authenticated():
            return None

        logger = get_logger("auth")
        try:
            async with self._client_factory() as client:
                data = await AuthAPI(client).get_current_user()
            user = User.model_validate(data)
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("identity lookup failed, continuing signed out: %s", e)
            return None

        logger.info("signed in as %s", user.id)
        return user

    def login(self, session_cookie: str) -> None:
        """Store the session cookie obtained from the browser sign-in."""
        session_cookie = session_cookie.strip()
        if not session_cookie:
            raise ValueError("Session cookie cannot be empty")
        self.config_service.save_credentials(session_cookie)

    def login_url(self) -> str:
        provider = self.config_service.config.auth.provider
        return f"{self.config_service.get_api_endpoint()}/auth/{provider}"

    async def logout(self) -> str:
        """End the backend session and forget the local cookie.

        The local cookie is cleared even when the backend call fails.
        """
        message = "Logged out"
        try:
            async with self._client_factory() as client:
                data = await AuthAPI(client).logout()
            message = data.get("message", message) if isinstance(data, dict) else message
        except (httpx.HTTPError, ValueError) as e:
            get_logger("auth").warning("backend logout failed: %s", e)
        finally:
            self.config_service.clear_credentials()
        return message

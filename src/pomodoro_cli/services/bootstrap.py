"""Application start-up: identity first, then the settings merge."""

from __future__ import annotations

from dataclasses import dataclass

from pomodoro_cli.models.user import User
from pomodoro_cli.services.api.client import APIClient
from pomodoro_cli.services.auth_service import AuthService
from pomodoro_cli.services.config_service import ConfigService, get_config_service
from pomodoro_cli.services.settings_service import LocalSettingsCache, SettingsStore


@dataclass
class AppServices:
    """Services handed to commands instead of global lookups."""

    config_service: ConfigService
    auth: AuthService
    store: SettingsStore
    user: User | None


async def bootstrap(
    config_service: ConfigService | None = None,
    cache: LocalSettingsCache | None = None,
) -> AppServices:
    """Resolve the signed-in user, then load settings for that user."""
    config_service = config_service or get_config_service()

    def client_factory() -> APIClient:
        return APIClient(config_service)

    auth = AuthService(config_service, client_factory=client_factory)
    user = await auth.resolve_identity()

    store = SettingsStore(
        cache or LocalSettingsCache(config_service.data_dir),
        user=user,
        client_factory=client_factory,
    )
    await store.load()
    return AppServices(config_service=config_service, auth=auth, store=store, user=user)

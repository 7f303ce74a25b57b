"""Configuration service for Pomodoro CLI.

``ConfigService`` is the single source of truth for on-disk configuration:

- Loading and saving config.json
- Session cookie credentials for the settings backend
- Resolving the API endpoint (``POMODORO_API_URL`` overrides config)
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from pomodoro_cli.models.config_models import AppConfig

_APP_NAME = "pomodoro_cli"
API_URL_ENV = "POMODORO_API_URL"


class ConfigService:
    """Loads, saves and resets the application configuration and credentials."""

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.credentials_path = self.config_dir / "credentials.json"
        self.data_dir = Path(user_data_dir(_APP_NAME))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, writing defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to disk."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get_api_endpoint(self) -> str:
        """API base URL without a trailing slash."""
        endpoint = os.environ.get(API_URL_ENV) or self.config.api.endpoint
        return endpoint.rstrip("/")

    def load_credentials(self) -> dict | None:
        """Load stored credentials.

        Returns:
            dict with 'session_cookie', or None if not signed in
        """
        if not self.credentials_path.exists():
            return None

        try:
            with open(self.credentials_path, encoding="utf-8") as f:
                data = json.load(f)
        except JSONDecodeError:
            return None

        if not isinstance(data, dict) or not data.get("session_cookie"):
            return None
        return data

    def save_credentials(self, session_cookie: str) -> None:
        """Save the backend session cookie.

        Args:
            session_cookie: Value of the backend's session cookie
        """
        self.credentials_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.credentials_path, "w", encoding="utf-8") as f:
            json.dump({"session_cookie": session_cookie}, f, indent=2)

        # Set secure file permissions
        self.credentials_path.chmod(0o600)

    def clear_credentials(self) -> None:
        """Forget the stored session cookie."""
        if self.credentials_path.exists():
            self.credentials_path.unlink()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service

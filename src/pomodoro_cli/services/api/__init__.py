"""Backend API access."""

from .auth import AuthAPI
from .client import APIClient
from .settings import SettingsAPI

__all__ = ["APIClient", "AuthAPI", "SettingsAPI"]

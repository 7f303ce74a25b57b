"""Settings API endpoints."""

from typing import Any

from pomodoro_cli.services.api.client import APIClient


class SettingsAPI:
    """The user's settings row (snake_case fields)."""

    def __init__(self, client: APIClient):
        self.client = client

    async def get_settings(self) -> dict:
        """Get the settings row, or the backend defaults if none exists."""
        response = await self.client.get("/settings")
        return response.json()

    async def update_settings(self, settings: dict[str, Any]) -> dict:
        """Upsert the settings row with the given fields."""
        response = await self.client.put("/settings", json=settings)
        return response.json()

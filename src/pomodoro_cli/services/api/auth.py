"""Authentication API endpoints."""

from pomodoro_cli.services.api.client import APIClient


class AuthAPI:
    """Identity endpoints of the backend."""

    def __init__(self, client: APIClient):
        self.client = client

    async def get_current_user(self) -> dict:
        """Get the signed-in user. Raises ``httpx.HTTPStatusError`` (401) if anonymous."""
        response = await self.client.request("GET", "/auth/user", retry=0)
        return response.json()

    async def logout(self) -> dict:
        """End the backend session."""
        response = await self.client.post("/auth/logout")
        return response.json()

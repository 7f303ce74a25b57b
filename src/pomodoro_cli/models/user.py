"""Signed-in user identity as returned by the backend."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class User(BaseModel):
    """Identity returned by ``GET /auth/user``.

    The backend passes the provider profile through, so both the passport
    style ``displayName`` and the database ``display_name`` are accepted.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    display_name: str = Field(
        default="", validation_alias=AliasChoices("displayName", "display_name")
    )
    username: str | None = None
    email: str | None = None
    provider: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @property
    def name(self) -> str:
        """Best available name for display."""
        return self.display_name or self.username or self.email or self.id

"""Configuration models for Pomodoro CLI."""

from __future__ import annotations

from pydantic import BaseModel, Field


class APIConfig(BaseModel):
    """API configuration."""

    endpoint: str = Field(default="http://localhost:3000")
    timeout: int = Field(default=30)
    retry: int = Field(default=3)


class AuthConfig(BaseModel):
    """Authentication configuration."""

    provider: str = Field(default="github")
    cookie_name: str = Field(default="connect.sid")


class TimerConfig(BaseModel):
    """Timer behaviour configuration."""

    sound: bool = Field(default=True, description="Ring the terminal bell on expiry")
    tick_ms: int = Field(default=1000, gt=0)
    auto_delete_grace_ms: int = Field(default=1500, ge=0)
    long_break_interval: int = Field(
        default=4, ge=1, description="Focus intervals per day before a long break"
    )


class AppConfig(BaseModel):
    """Main Pomodoro CLI configuration."""

    api: APIConfig = Field(default_factory=APIConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    timer: TimerConfig = Field(default_factory=TimerConfig)

"""
Configuration and settings for the FreelanceOS backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    environment: str = Field(default="production")

    # Hosted store (the reset procedure lives under this URL)
    supabase_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("supabase_url", "vite_supabase_url"),
    )
    supabase_service_role_key: Optional[str] = Field(default=None)

    # Credentials for the admin and cron entry points
    admin_api_key: Optional[str] = Field(default=None)
    cron_secret: Optional[str] = Field(default=None)

    # Reset behaviour
    reset_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("reset_enabled", "vite_reset_enabled"),
    )
    reset_interval: str = Field(
        default="daily",
        validation_alias=AliasChoices("reset_interval", "vite_reset_interval"),
    )
    reset_notify_users: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "reset_notify_users", "vite_reset_notify_users"
        ),
    )
    reset_function_path: str = Field(default="/functions/v1/database-reset")
    reset_request_timeout_seconds: float = Field(default=30.0)
    reset_probe_timeout_seconds: float = Field(default=10.0)
    reset_webhook_url: Optional[str] = Field(default=None)
    demo_user_email: str = Field(default="user@demo.com")

    # Database (Postgres expected)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "use_in_memory_backends", "freelanceos_use_in_memory_backends"
        ),
    )

    # Reset guard (Redis)
    redis_url: Optional[str] = Field(default=None)
    reset_lock_key: str = Field(default="freelanceos:reset-lock")
    reset_lock_timeout_seconds: int = Field(default=120)

    @property
    def reset_endpoint(self) -> Optional[str]:
        if not self.supabase_url:
            return None
        return self.supabase_url.rstrip("/") + self.reset_function_path


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()

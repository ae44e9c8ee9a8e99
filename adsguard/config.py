# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application configuration from environment variables."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from the environment (and an optional .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Ads Reporting"
    database_url: str = "sqlite:///./adsguard.db"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Role levels at or above this bypass every permission and ownership check
    superadmin_level_threshold: int = 10
    # Role levels at or above this see and modify rows owned by anyone
    admin_level_threshold: int = 8
    # Optional role names treated as superadmin regardless of level
    superadmin_role_names: list[str] = Field(default_factory=list)

    permission_cache_ttl_seconds: float = 30.0
    permission_cache_maxsize: int = 1024

    # Rows with owner_id NULL are only visible to privileged principals
    treat_unassigned_as_privileged_only: bool = True

    # Modules that are open while they have no active permissions at all
    default_allow_modules: list[str] = ["auth", "navigation"]

    store_timeout_seconds: float = 5.0

    @model_validator(mode="after")
    def _check_thresholds(self) -> "Settings":
        if self.admin_level_threshold > self.superadmin_level_threshold:
            raise ValueError(
                "admin_level_threshold must not exceed superadmin_level_threshold"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


settings = get_settings()

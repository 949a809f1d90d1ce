"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from followups.core.entities.policy import SuggestionPolicy
from followups.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "followups.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class FollowUpSettings(BaseSettings):
    """Suggestion engine thresholds, windows and materialization switches."""

    model_config = SettingsConfigDict(env_prefix="FOLLOWUP_")

    # Payment rules
    overdue_urgent_after_days: int = 7
    overdue_dedup_days: int = 7
    due_soon_window_days: int = 3
    due_soon_dedup_days: int = 3

    # Stale-contact rule
    stale_contact_after_days: int = 14
    stale_contact_high_after_days: int = 30
    stale_contact_dedup_days: int = 7

    # Output
    follow_up_delay_days: int = 1
    max_suggestions: int = Field(default=5, ge=1)

    # Materialization
    auto_create_urgent: bool = True
    name_attribution_fallback: bool = True
    max_concurrent_users: int = Field(default=4, ge=1)

    def to_policy(self) -> SuggestionPolicy:
        """Build the core policy object from these settings."""
        if self.stale_contact_high_after_days < self.stale_contact_after_days:
            raise ConfigurationError(
                "FOLLOWUP_STALE_CONTACT_HIGH_AFTER_DAYS must not be below "
                "FOLLOWUP_STALE_CONTACT_AFTER_DAYS",
                details={
                    "stale_contact_after_days": self.stale_contact_after_days,
                    "stale_contact_high_after_days": self.stale_contact_high_after_days,
                },
            )
        return SuggestionPolicy(
            overdue_urgent_after_days=self.overdue_urgent_after_days,
            overdue_dedup_days=self.overdue_dedup_days,
            due_soon_window_days=self.due_soon_window_days,
            due_soon_dedup_days=self.due_soon_dedup_days,
            stale_contact_after_days=self.stale_contact_after_days,
            stale_contact_high_after_days=self.stale_contact_high_after_days,
            stale_contact_dedup_days=self.stale_contact_dedup_days,
            follow_up_delay_days=self.follow_up_delay_days,
            max_suggestions=self.max_suggestions,
        )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Follow-up Suggestion Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    followup: FollowUpSettings = Field(default_factory=FollowUpSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None

"""
Application Configuration

Uses Pydantic Settings for type-safe environment variable management.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # ========================================================================
    # APPLICATION
    # ========================================================================

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    DEBUG: bool = False

    # ========================================================================
    # STORAGE
    # ========================================================================

    DATABASE_URL: str = Field(
        default="sqlite:///./gurupintar.db",
        description="SQLAlchemy URL of the key-value store holding the snapshot",
    )

    STORAGE_KEY: str = Field(
        default="guruPintarData", description="Key the application snapshot is stored under"
    )

    STORAGE_QUOTA_BYTES: int = Field(
        default=5 * 1024 * 1024,
        description="Largest serialized snapshot the store accepts",
    )

    SEED_DEMO_DATA: bool = Field(
        default=True, description="Start from demo data when nothing has been saved yet"
    )

    # ========================================================================
    # AI PROVIDERS
    # ========================================================================

    ANTHROPIC_API_KEY: str = Field(default="", description="Anthropic API key for Claude")
    GROK_API_KEY: str = Field(default="", description="xAI API key (fallback provider)")

    AI_MODEL: str = Field(
        default="claude-sonnet-4-5", description="Default model when a prompt does not set one"
    )

    GROK_MODEL: str = Field(default="grok-3", description="Model used on the xAI endpoint")

    AI_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0, description="Per-request AI timeout")

    PROMPT_LIBRARY_PATH: Path = Field(
        default=_PACKAGE_DIR / "ai" / "prompts.json",
        description="Path to the prompt library JSON",
    )

    # ========================================================================
    # AUTH (demo stub)
    # ========================================================================

    DEMO_LOGIN_EMAIL: str = "admin@sekolah.id"
    DEMO_LOGIN_PASSWORD: str = "admin123"

    @field_validator("STORAGE_QUOTA_BYTES")
    @classmethod
    def validate_quota(cls: type[Settings], v: int) -> int:  # noqa: ARG003
        """Quota must leave room for at least an empty snapshot."""
        if v < 1024:
            raise ValueError(f"STORAGE_QUOTA_BYTES is too small: {v}")
        return v

    # ========================================================================
    # COMPUTED PROPERTIES
    # ========================================================================

    @property
    def prompt_library_path(self) -> Path:
        """Path to the prompt library JSON."""
        return self.PROMPT_LIBRARY_PATH

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == "production"

    @property
    def is_local(self) -> bool:
        """Check if running locally."""
        return self.ENVIRONMENT == "local"


# Global settings instance
settings = Settings()

"""
Unit Tests for Configuration

Tests for settings and configuration management.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gurupintar.config import Settings


def test_settings_defaults():
    """Test default settings values."""
    settings = Settings()

    assert settings.ENVIRONMENT in ["local", "staging", "production"]
    assert settings.LOG_LEVEL in ["DEBUG", "INFO", "WARNING", "ERROR"]
    assert isinstance(settings.DATABASE_URL, str)
    assert settings.STORAGE_KEY == "guruPintarData"
    assert settings.STORAGE_QUOTA_BYTES == 5 * 1024 * 1024


def test_settings_computed_properties():
    """Test computed properties."""
    settings = Settings()

    assert isinstance(settings.prompt_library_path, Path)
    assert settings.prompt_library_path.name == "prompts.json"

    assert isinstance(settings.is_production, bool)
    assert isinstance(settings.is_local, bool)


def test_settings_environment_specific():
    """Test environment-specific behavior."""
    settings_local = Settings(ENVIRONMENT="local")
    assert settings_local.is_local is True
    assert settings_local.is_production is False

    settings_prod = Settings(ENVIRONMENT="production")
    assert settings_prod.is_local is False
    assert settings_prod.is_production is True


def test_settings_read_environment(monkeypatch):
    """Environment variables override defaults."""
    monkeypatch.setenv("STORAGE_KEY", "otherKey")
    monkeypatch.setenv("SEED_DEMO_DATA", "false")

    settings = Settings()

    assert settings.STORAGE_KEY == "otherKey"
    assert settings.SEED_DEMO_DATA is False


def test_quota_must_fit_an_empty_snapshot():
    with pytest.raises(ValidationError, match="too small"):
        Settings(STORAGE_QUOTA_BYTES=10)


def test_ai_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(AI_TIMEOUT_SECONDS=0)

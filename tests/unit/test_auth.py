"""
Unit Tests for the Demo Login
"""

import pytest

from gurupintar.config import Settings
from gurupintar.core.auth import authenticate
from gurupintar.core.schemas import AppState


@pytest.fixture
def auth_settings() -> Settings:
    return Settings(DEMO_LOGIN_EMAIL="admin@sekolah.id", DEMO_LOGIN_PASSWORD="admin123")


class TestAuthenticate:
    def test_teacher_login(self, scenario_state: AppState, auth_settings: Settings):
        result = authenticate(" Admin@Sekolah.ID ", "admin123", scenario_state, auth_settings)

        assert result is not None
        assert result.role == "TEACHER"
        assert result.display_name == "Bu Siti"
        assert result.student_id is None

    def test_teacher_display_name_fallback(self, auth_settings: Settings):
        result = authenticate("admin@sekolah.id", "admin123", AppState(), auth_settings)

        assert result.display_name == "Guru"

    def test_teacher_wrong_password(self, scenario_state: AppState, auth_settings: Settings):
        assert authenticate("admin@sekolah.id", "salah", scenario_state, auth_settings) is None

    def test_student_login_by_nis(self, scenario_state: AppState, auth_settings: Settings):
        result = authenticate("1002", "", scenario_state, auth_settings)

        assert result.role == "STUDENT"
        assert result.display_name == "Budi Santoso"
        assert (result.student_id, result.class_id) == ("s2", "c1")

    def test_unknown_identifier(self, scenario_state: AppState, auth_settings: Settings):
        assert authenticate("9999", "x", scenario_state, auth_settings) is None

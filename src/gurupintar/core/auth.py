"""
Demo Login

Matches a login against the configured demo teacher account or a student's
NIS. There are no sessions or tokens; the result only tells the client which
view to open.
"""

from __future__ import annotations

import logging
import secrets
from typing import Literal

from gurupintar.config import Settings
from gurupintar.core.schemas import AppState, RecordModel

logger = logging.getLogger(__name__)


class LoginResult(RecordModel):
    role: Literal["TEACHER", "STUDENT"]
    display_name: str
    student_id: str | None = None
    class_id: str | None = None


def authenticate(
    identifier: str, password: str, state: AppState, settings: Settings
) -> LoginResult | None:
    """
    Resolve a login.

    The demo teacher logs in with ``DEMO_LOGIN_EMAIL`` / ``DEMO_LOGIN_PASSWORD``.
    A student logs in with their NIS as identifier; the password is not checked.

    Returns:
        Login result, or None if the credentials match nobody
    """
    identifier = identifier.strip()

    if identifier.lower() == settings.DEMO_LOGIN_EMAIL.lower():
        if secrets.compare_digest(password, settings.DEMO_LOGIN_PASSWORD):
            return LoginResult(
                role="TEACHER",
                display_name=state.settings.teacher_name or "Guru",
            )
        logger.info("Rejected teacher login: wrong password")
        return None

    student = next((s for s in state.students if s.nis == identifier), None)
    if student is not None:
        return LoginResult(
            role="STUDENT",
            display_name=student.name,
            student_id=student.id,
            class_id=student.class_id,
        )

    return None

"""
Input validation functions for GuruPintar.

All validation functions follow the pattern:
1. Accept raw user input (string, number, record)
2. Normalize/clean the input
3. Validate against business rules
4. Return cleaned value or raise ValidationError

Mutations call these before building a new snapshot, so a failed check never
leaves a partial change behind.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import date as date_type
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gurupintar.core.schemas import ExamQuestion, Questionnaire


class ValidationError(Exception):
    """Raised when user input fails validation."""

    pass


class RecordNotFoundError(ValidationError):
    """Raised when a mutation references a record that does not exist."""

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} not found with ID: {record_id}")


# ============================================================================
# Required fields
# ============================================================================


def validate_required(value: str | None, field_name: str) -> str:
    """
    Validate a required free-text field.

    Args:
        value: Raw input
        field_name: Human readable field name used in the error message

    Returns:
        Stripped value with internal whitespace normalized

    Raises:
        ValidationError: If the value is missing or blank
    """
    if value is None:
        raise ValidationError(f"{field_name} cannot be empty")

    cleaned = re.sub(r"\s+", " ", value.strip())

    if cleaned == "":
        raise ValidationError(f"{field_name} cannot be empty")

    return cleaned


def validate_iso_date(value: str | None, field_name: str = "Date") -> str:
    """
    Validate a YYYY-MM-DD date string.

    Raises:
        ValidationError: If the value is empty or not a calendar date
    """
    cleaned = validate_required(value, field_name)

    try:
        date_type.fromisoformat(cleaned)
    except ValueError as e:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format") from e

    return cleaned


def validate_month(value: str | None) -> str:
    """Validate a YYYY-MM month prefix."""
    cleaned = validate_required(value, "Month")

    if not re.fullmatch(r"\d{4}-(0[1-9]|1[0-2])", cleaned):
        raise ValidationError("Month must be in YYYY-MM format")

    return cleaned


# ============================================================================
# Scores & settings
# ============================================================================


def clamp_score(score: float, max_score: float) -> float:
    """Clamp a score into [0, max_score]."""
    if math.isnan(score):
        return 0
    return min(max(score, 0), max_score)


def validate_kkm(kkm: float | int | str | None) -> float:
    """
    Validate the minimum passing score (KKM).

    Raises:
        ValidationError: If KKM is missing, not a number or outside 0-100
    """
    if kkm is None or kkm == "":
        raise ValidationError("KKM cannot be empty")

    try:
        value = float(kkm)
    except (TypeError, ValueError) as e:
        raise ValidationError("KKM must be a number") from e

    if not math.isfinite(value) or not 0 <= value <= 100:
        raise ValidationError("KKM must be between 0 and 100")

    return value


# ============================================================================
# Questionnaires
# ============================================================================


def validate_answers(questionnaire: Questionnaire, answers: Mapping[str, int]) -> dict[str, int]:
    """
    Validate a questionnaire response.

    Every question must be answered with a score from 1 to 4. Answers to
    unknown question ids are dropped.

    Raises:
        ValidationError: If a question is unanswered or a score is out of range
    """
    cleaned: dict[str, int] = {}

    for question in questionnaire.questions:
        if question.id not in answers:
            raise ValidationError("All questions must be answered")

        score = answers[question.id]
        if not isinstance(score, int) or isinstance(score, bool) or not 1 <= score <= 4:
            raise ValidationError(f"Answer to question {question.id} must be between 1 and 4")

        cleaned[question.id] = score

    return cleaned


# ============================================================================
# Exam questions
# ============================================================================


def validate_exam_question(question: ExamQuestion) -> ExamQuestion:
    """
    Validate one exam question before it is saved.

    Multiple choice questions need at least two options and exactly one
    option flagged as correct.

    Raises:
        ValidationError: If the question text is empty or the options are invalid
    """
    validate_required(question.text, "Question text")

    if question.points < 0:
        raise ValidationError("Question points cannot be negative")

    match question.type:
        case "MULTIPLE_CHOICE":
            if len(question.options) < 2:
                raise ValidationError("Multiple choice questions need at least 2 options")
            if len(question.correct_options) != 1:
                raise ValidationError("Mark exactly one option as the correct answer")
        case "ESSAY" | "TRUE_FALSE":
            pass

    return question

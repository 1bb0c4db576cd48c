"""
Questionnaire Schemas

Talent / learning-style questionnaires and student responses.
"""

from __future__ import annotations

from pydantic import Field

from .base import RecordModel, new_id


class Question(RecordModel):
    id: str = Field(default_factory=new_id)
    text: str
    category: str  # e.g. "Visual", "Auditory", "Kinestetik"


class Questionnaire(RecordModel):
    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    questions: list[Question] = Field(default_factory=list)


class QuestionnaireResponse(RecordModel):
    """Answers of one student, keyed by (questionnaire_id, student_id).

    ``answers`` maps question id to a score from 1 to 4.
    """

    id: str
    questionnaire_id: str
    student_id: str
    date: str
    answers: dict[str, int] = Field(default_factory=dict)
    ai_analysis: str | None = None

    @staticmethod
    def make_id(questionnaire_id: str, student_id: str) -> str:
        return f"{questionnaire_id}_{student_id}"

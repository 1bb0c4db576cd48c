"""
Academic AI Features

Report-card narratives, class trend analysis, talent analysis and exam
question generation. Text features never fail: when no provider answers they
return a fixed Indonesian message the teacher can overwrite. Question
generation raises ``AIServiceError`` instead, since a placeholder question
would be saved into an exam.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from pydantic import ValidationError as PydanticValidationError

from gurupintar.analytics import average
from gurupintar.core.schemas import AssessmentType, ExamQuestion, exam_question_adapter, new_id
from gurupintar.core.validation import ValidationError, validate_exam_question

from .client import AIClient, get_ai_client
from .prompt_loader import PromptLibrary, get_prompt_library

logger = logging.getLogger(__name__)

# Fallback messages shown in place of AI output
FEEDBACK_UNAVAILABLE = "Layanan AI tidak tersedia. Cek konfigurasi API Key."
FEEDBACK_FAILED = "Gagal menghasilkan saran otomatis. Silakan tulis manual."
TRENDS_UNAVAILABLE = "Analisis tidak tersedia."
TRENDS_FAILED = "Gagal menganalisis data."
TALENT_UNAVAILABLE = "Analisis AI tidak tersedia."
TALENT_FAILED = "Gagal melakukan analisis bakat saat ini."
EXAM_FAILED = "Gagal membuat soal. Coba lagi."

GeneratedQuestionType = Literal["MULTIPLE_CHOICE", "ESSAY"]

QUESTION_TYPE_LABELS: dict[str, str] = {
    "MULTIPLE_CHOICE": "Pilihan Ganda",
    "ESSAY": "Essay",
}

QUESTION_ITEM_SCHEMAS: dict[str, str] = {
    "MULTIPLE_CHOICE": json.dumps(
        {
            "text": "Pertanyaan",
            "points": 10,
            "options": [
                {"text": "Pilihan A", "isCorrect": False},
                {"text": "Pilihan B (Jawaban Benar)", "isCorrect": True},
                {"text": "Pilihan C", "isCorrect": False},
                {"text": "Pilihan D", "isCorrect": False},
            ],
        },
        ensure_ascii=False,
        indent=2,
    ),
    "ESSAY": json.dumps(
        {
            "text": "Pertanyaan",
            "points": 10,
            "answerKey": "Kunci jawaban atau poin-poin penting jawaban",
        },
        ensure_ascii=False,
        indent=2,
    ),
}

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)


class AIServiceError(Exception):
    """AI output was unavailable or unusable."""

    pass


def parse_generated_questions(
    raw: str, question_type: GeneratedQuestionType
) -> list[ExamQuestion]:
    """
    Parse an AI reply into validated exam questions.

    Markdown code fences around the JSON array are stripped. Every question
    and option gets a fresh id; ids from the model are ignored.

    Raises:
        AIServiceError: If the reply is not a JSON array of valid questions
    """
    cleaned = _FENCE_PATTERN.sub("", raw).strip()

    try:
        items = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AIServiceError(f"AI reply is not valid JSON: {e}") from e

    if not isinstance(items, list) or not items:
        raise AIServiceError("AI reply is not a non-empty JSON array")

    questions: list[ExamQuestion] = []
    for item in items:
        if not isinstance(item, dict):
            raise AIServiceError("AI reply contains a non-object item")

        data: dict[str, Any] = {**item, "id": new_id(), "type": question_type}
        if question_type == "MULTIPLE_CHOICE":
            data["options"] = [
                {**option, "id": new_id()}
                for option in item.get("options") or []
                if isinstance(option, dict)
            ]
        else:
            data.pop("options", None)

        try:
            question = exam_question_adapter.validate_python(data)
            questions.append(validate_exam_question(question))
        except (PydanticValidationError, ValidationError) as e:
            raise AIServiceError(f"AI reply contains an invalid question: {e}") from e

    return questions


class AcademicAIService:
    """Builds prompts from the library and calls the AI client."""

    def __init__(self, client: AIClient, library: PromptLibrary):
        self.client = client
        self.library = library

    def _complete(self, prompt_id: str, context: dict[str, Any]) -> str | None:
        config = self.library.get_prompt_config(prompt_id)
        result = self.client.generate_completion(
            model=config["model"],
            system=self.library.get_system_prompt(prompt_id),
            messages=[
                {"role": "user", "content": self.library.render_user_message(prompt_id, context)}
            ],
            max_tokens=config["max_tokens"],
            temperature=config["temperature"],
        )
        if result is None or not result.strip():
            return None
        return result.strip()

    def generate_student_feedback(
        self,
        student_name: str,
        average_score: float,
        strengths: Sequence[AssessmentType],
        weaknesses: Sequence[AssessmentType],
    ) -> str:
        """Short report-card narrative (at most three sentences)."""
        if not self.client.is_configured:
            return FEEDBACK_UNAVAILABLE

        result = self._complete(
            "REPORT-001",
            {
                "student_name": student_name,
                "average_score": average_score,
                "strengths": list(strengths) or "Cukup baik secara umum",
                "weaknesses": list(weaknesses) or "Pertahankan prestasi",
            },
        )
        return result or FEEDBACK_FAILED

    def analyze_class_trends(self, class_name: str, scores: Sequence[float]) -> str:
        """Three teaching recommendations from a class's score spread."""
        if not self.client.is_configured:
            return TRENDS_UNAVAILABLE

        result = self._complete(
            "CLASS-001",
            {
                "class_name": class_name,
                "average_score": f"{average(scores):.2f}",
                "scores_json": json.dumps(list(scores)),
            },
        )
        return result or TRENDS_FAILED

    def analyze_talent(
        self, student_name: str, questionnaire_title: str, scores_by_category: Mapping[str, int]
    ) -> str:
        if not self.client.is_configured:
            return TALENT_UNAVAILABLE

        result = self._complete(
            "TALENT-001",
            {
                "student_name": student_name,
                "questionnaire_title": questionnaire_title,
                "category_scores": scores_by_category,
            },
        )
        return result or TALENT_FAILED

    def generate_exam_questions(
        self, topic: str, level: str, count: int, question_type: GeneratedQuestionType
    ) -> list[ExamQuestion]:
        """
        Generate exam questions on a topic.

        Raises:
            AIServiceError: If no provider answered or the reply is unusable
        """
        if not self.client.is_configured:
            raise AIServiceError(EXAM_FAILED)

        raw = self._complete(
            "EXAM-001",
            {
                "count": count,
                "type_label": QUESTION_TYPE_LABELS[question_type],
                "topic": topic,
                "level": level,
                "item_schema": QUESTION_ITEM_SCHEMAS[question_type],
            },
        )
        if raw is None:
            raise AIServiceError(EXAM_FAILED)

        try:
            return parse_generated_questions(raw, question_type)
        except AIServiceError as e:
            logger.warning(f"Discarding generated questions: {e}")
            raise AIServiceError(EXAM_FAILED) from e


def get_ai_service() -> AcademicAIService:
    return AcademicAIService(get_ai_client(), get_prompt_library())

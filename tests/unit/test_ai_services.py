"""
Unit Tests for the Academic AI Features

The AI client is a mock; prompts come from the packaged library.
"""

import json
from unittest.mock import MagicMock

import pytest

from gurupintar.ai import AcademicAIService, AIClient, AIServiceError, parse_generated_questions
from gurupintar.ai.prompt_loader import PromptLibrary
from gurupintar.ai.services import (
    EXAM_FAILED,
    FEEDBACK_FAILED,
    FEEDBACK_UNAVAILABLE,
    TALENT_UNAVAILABLE,
    TRENDS_FAILED,
)
from gurupintar.core.schemas import AssessmentType, EssayQuestion, MultipleChoiceQuestion

GENERATED_MC = [
    {
        "id": "from-model",
        "text": "Hasil 3 x 4?",
        "points": 5,
        "options": [
            {"text": "7", "isCorrect": False},
            {"text": "12", "isCorrect": True},
            {"text": "34", "isCorrect": False},
        ],
    },
    {
        "text": "Hasil 10 - 4?",
        "options": [{"text": "6", "isCorrect": True}, {"text": "14", "isCorrect": False}],
    },
]


@pytest.fixture
def ai_client() -> MagicMock:
    client = MagicMock(spec=AIClient)
    client.is_configured = True
    return client


@pytest.fixture
def service(ai_client) -> AcademicAIService:
    return AcademicAIService(ai_client, PromptLibrary())


def _user_message(ai_client: MagicMock) -> str:
    return ai_client.generate_completion.call_args.kwargs["messages"][0]["content"]


class TestTextFeatures:
    """Narrative features fall back to fixed messages."""

    def test_feedback_not_configured(self, service, ai_client):
        ai_client.is_configured = False

        result = service.generate_student_feedback("Aisyah", 80, [], [])

        assert result == FEEDBACK_UNAVAILABLE
        ai_client.generate_completion.assert_not_called()

    def test_feedback(self, service, ai_client):
        ai_client.generate_completion.return_value = "  Aisyah rajin belajar.  "

        result = service.generate_student_feedback(
            "Aisyah", 88.5, [AssessmentType.PH], [AssessmentType.PTS]
        )

        assert result == "Aisyah rajin belajar."
        kwargs = ai_client.generate_completion.call_args.kwargs
        assert kwargs["model"] == "claude-sonnet-4-5"
        assert kwargs["max_tokens"] == 512
        message = _user_message(ai_client)
        assert "Aisyah" in message
        assert "88.5" in message
        assert "Penilaian Harian" in message
        assert "Penilaian Tengah Semester" in message

    def test_feedback_without_strengths_or_weaknesses(self, service, ai_client):
        ai_client.generate_completion.return_value = "Ok"

        service.generate_student_feedback("Budi", 75, [], [])

        message = _user_message(ai_client)
        assert "Cukup baik secara umum" in message
        assert "Pertahankan prestasi" in message

    @pytest.mark.parametrize("reply", [None, "", "   "])
    def test_feedback_failed(self, service, ai_client, reply):
        ai_client.generate_completion.return_value = reply

        assert service.generate_student_feedback("Budi", 75, [], []) == FEEDBACK_FAILED

    def test_class_trends(self, service, ai_client):
        ai_client.generate_completion.return_value = "1. Remedial"

        result = service.analyze_class_trends("X IPA 1", [70, 80])

        assert result == "1. Remedial"
        message = _user_message(ai_client)
        assert "X IPA 1" in message
        assert "75.00" in message
        assert "[70, 80]" in message

    def test_class_trends_failed(self, service, ai_client):
        ai_client.generate_completion.return_value = None

        assert service.analyze_class_trends("X IPA 1", []) == TRENDS_FAILED

    def test_talent(self, service, ai_client):
        ai_client.generate_completion.return_value = "Gaya belajar visual."

        result = service.analyze_talent("Aisyah", "Tes Gaya Belajar", {"Visual": 7, "Auditory": 2})

        assert result == "Gaya belajar visual."
        assert "Visual: 7, Auditory: 2" in _user_message(ai_client)

    def test_talent_not_configured(self, service, ai_client):
        ai_client.is_configured = False

        assert service.analyze_talent("Aisyah", "Tes", {"Visual": 7}) == TALENT_UNAVAILABLE


class TestExamGeneration:
    """Question generation raises instead of falling back."""

    def test_generates_questions(self, service, ai_client):
        ai_client.generate_completion.return_value = (
            "```json\n" + json.dumps(GENERATED_MC) + "\n```"
        )

        questions = service.generate_exam_questions("Perkalian", "SD Kelas 3", 2, "MULTIPLE_CHOICE")

        assert len(questions) == 2
        assert all(isinstance(q, MultipleChoiceQuestion) for q in questions)
        message = _user_message(ai_client)
        assert "Buatkan 2 soal ujian Pilihan Ganda" in message
        assert "Perkalian" in message

    def test_not_configured(self, service, ai_client):
        ai_client.is_configured = False

        with pytest.raises(AIServiceError, match=EXAM_FAILED):
            service.generate_exam_questions("Perkalian", "SD", 2, "ESSAY")

    def test_no_reply(self, service, ai_client):
        ai_client.generate_completion.return_value = None

        with pytest.raises(AIServiceError, match=EXAM_FAILED):
            service.generate_exam_questions("Perkalian", "SD", 2, "ESSAY")

    def test_unusable_reply(self, service, ai_client):
        ai_client.generate_completion.return_value = "Maaf, saya tidak bisa."

        with pytest.raises(AIServiceError, match=EXAM_FAILED):
            service.generate_exam_questions("Perkalian", "SD", 2, "ESSAY")


class TestParseGeneratedQuestions:
    def test_fresh_ids(self):
        questions = parse_generated_questions(json.dumps(GENERATED_MC), "MULTIPLE_CHOICE")

        assert questions[0].id != "from-model"
        assert questions[0].id != questions[1].id
        option_ids = [o.id for q in questions for o in q.options]
        assert len(set(option_ids)) == len(option_ids)
        assert questions[0].correct_options[0].text == "12"
        assert questions[0].points == 5

    def test_essay_drops_options(self):
        raw = json.dumps(
            [{"text": "Jelaskan fotosintesis", "answerKey": "Cahaya", "options": [{"text": "x"}]}]
        )

        (question,) = parse_generated_questions(raw, "ESSAY")

        assert isinstance(question, EssayQuestion)
        assert question.answer_key == "Cahaya"

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[]",
            '{"text": "single object"}',
            '["plain string"]',
            '[{"text": "", "answerKey": "x"}]',
        ],
    )
    def test_rejects_unusable_replies(self, raw):
        with pytest.raises(AIServiceError):
            parse_generated_questions(raw, "ESSAY")

    def test_rejects_two_correct_options(self):
        items = [
            {
                "text": "Pilih",
                "options": [{"text": "A", "isCorrect": True}, {"text": "B", "isCorrect": True}],
            }
        ]

        with pytest.raises(AIServiceError, match="invalid question"):
            parse_generated_questions(json.dumps(items), "MULTIPLE_CHOICE")

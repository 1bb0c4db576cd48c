"""
Questionnaire Scoring

Category scores are plain sums of the 1-4 answers per question category.
"""

from __future__ import annotations

from gurupintar.core.schemas import AppState, Questionnaire, QuestionnaireResponse, RecordModel
from gurupintar.core.validation import RecordNotFoundError


class StudentResult(RecordModel):
    student_id: str
    name: str
    response: QuestionnaireResponse | None = None
    category_scores: dict[str, int] = {}


def category_scores(
    questionnaire: Questionnaire, response: QuestionnaireResponse
) -> dict[str, int]:
    """Sum answers per category, in question order. Unanswered questions count 0."""
    scores: dict[str, int] = {}
    for question in questionnaire.questions:
        scores[question.category] = scores.get(question.category, 0) + response.answers.get(
            question.id, 0
        )
    return scores


def questionnaire_results(
    state: AppState, questionnaire_id: str, class_id: str
) -> list[StudentResult]:
    questionnaire = state.find_questionnaire(questionnaire_id)
    if questionnaire is None:
        raise RecordNotFoundError("Questionnaire", questionnaire_id)

    responses = {
        r.student_id: r
        for r in state.questionnaire_responses
        if r.questionnaire_id == questionnaire_id
    }

    results = []
    for student in state.students_in_class(class_id):
        response = responses.get(student.id)
        results.append(
            StudentResult(
                student_id=student.id,
                name=student.name,
                response=response,
                category_scores=category_scores(questionnaire, response) if response else {},
            )
        )
    return results

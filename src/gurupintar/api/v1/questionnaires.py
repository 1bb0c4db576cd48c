"""
Questionnaire API Endpoints

Talent and learning-style questionnaires, student responses and AI analysis.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gurupintar.ai import AcademicAIService
from gurupintar.analytics import StudentResult, category_scores, questionnaire_results
from gurupintar.api.v1.deps import get_ai, get_store, mutation_result
from gurupintar.core.schemas import (
    MutationResponse,
    Questionnaire,
    QuestionnaireResponse,
)
from gurupintar.core.schemas.requests import QuestionnaireSubmit, ResponseSubmit
from gurupintar.store import AcademicStateStore
from gurupintar.store import mutations as m

router = APIRouter()


def _get_questionnaire_or_404(store: AcademicStateStore, questionnaire_id: str) -> Questionnaire:
    questionnaire = store.state.find_questionnaire(questionnaire_id)
    if questionnaire is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Questionnaire not found with ID: {questionnaire_id}",
        )
    return questionnaire


@router.get("", response_model=list[Questionnaire])
async def list_questionnaires(
    store: AcademicStateStore = Depends(get_store),
) -> list[Questionnaire]:
    return store.state.questionnaires


@router.post(
    "", response_model=MutationResponse[Questionnaire], status_code=status.HTTP_201_CREATED
)
async def create_questionnaire(
    submission: QuestionnaireSubmit, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    questionnaire = Questionnaire(**submission.model_dump())
    state = store.dispatch(m.save_questionnaire, questionnaire)
    return mutation_result(store, state.find_questionnaire(questionnaire.id))


@router.put("/{questionnaire_id}", response_model=MutationResponse[Questionnaire])
async def update_questionnaire(
    questionnaire_id: str,
    submission: QuestionnaireSubmit,
    store: AcademicStateStore = Depends(get_store),
) -> MutationResponse[Any]:
    _get_questionnaire_or_404(store, questionnaire_id)
    questionnaire = Questionnaire(id=questionnaire_id, **submission.model_dump())
    state = store.dispatch(m.save_questionnaire, questionnaire)
    return mutation_result(store, state.find_questionnaire(questionnaire_id))


@router.delete("/{questionnaire_id}", response_model=MutationResponse[None])
async def delete_questionnaire(
    questionnaire_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Delete a questionnaire and every response to it."""
    store.dispatch(m.delete_questionnaire, questionnaire_id)
    return mutation_result(store)


@router.post(
    "/{questionnaire_id}/responses",
    response_model=MutationResponse[QuestionnaireResponse],
    status_code=status.HTTP_201_CREATED,
)
async def submit_response(
    questionnaire_id: str,
    submission: ResponseSubmit,
    store: AcademicStateStore = Depends(get_store),
) -> MutationResponse[Any]:
    """Save a student's answers; answering again replaces the earlier response."""
    state = store.dispatch(
        m.save_response, questionnaire_id, submission.student_id, submission.answers
    )
    response_id = QuestionnaireResponse.make_id(questionnaire_id, submission.student_id)
    return mutation_result(
        store, next(r for r in state.questionnaire_responses if r.id == response_id)
    )


@router.get("/{questionnaire_id}/results", response_model=list[StudentResult])
async def get_results(
    questionnaire_id: str,
    class_id: str = Query(..., alias="classId"),
    store: AcademicStateStore = Depends(get_store),
) -> list[StudentResult]:
    """Every student of the class with their response and category scores."""
    _get_questionnaire_or_404(store, questionnaire_id)
    return questionnaire_results(store.state, questionnaire_id, class_id)


@router.post(
    "/{questionnaire_id}/responses/{student_id}/analysis",
    response_model=MutationResponse[QuestionnaireResponse],
)
async def analyze_response(
    questionnaire_id: str,
    student_id: str,
    store: AcademicStateStore = Depends(get_store),
    ai: AcademicAIService = Depends(get_ai),
) -> MutationResponse[Any]:
    """Run the AI talent analysis for one response and cache it on the response."""
    questionnaire = _get_questionnaire_or_404(store, questionnaire_id)
    response_id = QuestionnaireResponse.make_id(questionnaire_id, student_id)
    response = next((r for r in store.state.questionnaire_responses if r.id == response_id), None)
    student = store.state.find_student(student_id)

    if response is None or student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Response not found with ID: {response_id}",
        )

    analysis = await asyncio.to_thread(
        ai.analyze_talent,
        student.name,
        questionnaire.title,
        category_scores(questionnaire, response),
    )

    # Merged into whatever state is current once the AI call returns
    state = store.dispatch(m.attach_talent_analysis, response_id, analysis)
    return mutation_result(
        store, next((r for r in state.questionnaire_responses if r.id == response_id), None)
    )

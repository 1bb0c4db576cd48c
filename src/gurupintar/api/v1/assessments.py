"""
Assessment API Endpoints

Assessments, grading and live grading statistics.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gurupintar.analytics import AssessmentStats, assessment_statistics
from gurupintar.api.v1.deps import get_store, mutation_result
from gurupintar.core.schemas import Assessment, Grade, MutationResponse
from gurupintar.core.schemas.requests import (
    AssessmentCreate,
    AssessmentUpdate,
    GradesSubmit,
    PendingScores,
)
from gurupintar.store import AcademicStateStore
from gurupintar.store import mutations as m

router = APIRouter()


def _get_assessment_or_404(store: AcademicStateStore, assessment_id: str) -> Assessment:
    assessment = store.state.find_assessment(assessment_id)
    if assessment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment not found with ID: {assessment_id}",
        )
    return assessment


@router.get("", response_model=list[Assessment])
async def list_assessments(
    class_id: str | None = Query(default=None, alias="classId"),
    store: AcademicStateStore = Depends(get_store),
) -> list[Assessment]:
    """List assessments, optionally for one class, oldest first."""
    assessments = (
        store.state.assessments_in_class(class_id) if class_id else store.state.assessments
    )
    return sorted(assessments, key=lambda a: a.date)


@router.post(
    "", response_model=MutationResponse[Assessment], status_code=status.HTTP_201_CREATED
)
async def create_assessment(
    assessment_data: AssessmentCreate, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    assessment = Assessment(**assessment_data.model_dump())
    state = store.dispatch(m.add_assessment, assessment)
    return mutation_result(store, state.find_assessment(assessment.id))


@router.put("/{assessment_id}", response_model=MutationResponse[Assessment])
async def update_assessment(
    assessment_id: str,
    assessment_update: AssessmentUpdate,
    store: AcademicStateStore = Depends(get_store),
) -> MutationResponse[Any]:
    state = store.dispatch(
        m.update_assessment, assessment_id, **assessment_update.model_dump(exclude_unset=True)
    )
    return mutation_result(store, state.find_assessment(assessment_id))


@router.delete("/{assessment_id}", response_model=MutationResponse[None])
async def delete_assessment(
    assessment_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Delete an assessment and all of its grades."""
    store.dispatch(m.delete_assessment, assessment_id)
    return mutation_result(store)


@router.get("/{assessment_id}/grades", response_model=list[Grade])
async def list_grades(
    assessment_id: str, store: AcademicStateStore = Depends(get_store)
) -> list[Grade]:
    _get_assessment_or_404(store, assessment_id)
    return [g for g in store.state.grades if g.assessment_id == assessment_id]


@router.put("/{assessment_id}/grades", response_model=MutationResponse[list[Grade]])
async def save_grades(
    assessment_id: str, submission: GradesSubmit, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Save scores keyed by student id. Scores are clamped to [0, maxScore]."""
    state = store.dispatch(m.save_grades, assessment_id, submission.scores)
    return mutation_result(store, [g for g in state.grades if g.assessment_id == assessment_id])


@router.post("/{assessment_id}/statistics", response_model=AssessmentStats | None)
async def get_assessment_statistics(
    assessment_id: str,
    pending: PendingScores | None = None,
    store: AcademicStateStore = Depends(get_store),
) -> AssessmentStats | None:
    """Live statistics; unsaved scores in the body take precedence over saved grades.

    Returns null when no student has a score yet.
    """
    _get_assessment_or_404(store, assessment_id)
    return assessment_statistics(
        store.state, assessment_id, pending.scores if pending is not None else None
    )

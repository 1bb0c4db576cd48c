"""
Student API Endpoints
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from gurupintar.api.v1.deps import get_store, mutation_result
from gurupintar.core.schemas import MutationResponse, Student
from gurupintar.core.schemas.requests import StudentUpdate
from gurupintar.store import AcademicStateStore
from gurupintar.store import mutations as m

router = APIRouter()


@router.get("/{student_id}", response_model=Student)
async def get_student(student_id: str, store: AcademicStateStore = Depends(get_store)) -> Student:
    student = store.state.find_student(student_id)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Student not found with ID: {student_id}",
        )
    return student


@router.put("/{student_id}", response_model=MutationResponse[Student])
async def update_student(
    student_id: str, student_update: StudentUpdate, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Update student profile.

    Only updates fields that are explicitly provided.
    """
    state = store.dispatch(
        m.update_student, student_id, **student_update.model_dump(exclude_unset=True)
    )
    return mutation_result(store, state.find_student(student_id))


@router.delete("/{student_id}", response_model=MutationResponse[None])
async def delete_student(
    student_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Delete a student with their grades, questionnaire answers and attendance records."""
    store.dispatch(m.delete_student, student_id)
    return mutation_result(store)

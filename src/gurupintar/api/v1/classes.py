"""
Class API Endpoints

Classes and the students enrolled in them.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from gurupintar.analytics import StudentAnalytics, student_analytics
from gurupintar.api.v1.deps import get_store, mutation_result
from gurupintar.core.schemas import ClassGroup, MutationResponse, Student
from gurupintar.core.schemas.requests import ClassCreate, ClassUpdate, RosterImport, StudentCreate
from gurupintar.store import AcademicStateStore
from gurupintar.store import mutations as m

router = APIRouter()


def _get_class_or_404(store: AcademicStateStore, class_id: str) -> ClassGroup:
    class_group = store.state.find_class(class_id)
    if class_group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Class not found with ID: {class_id}",
        )
    return class_group


@router.get("", response_model=list[ClassGroup])
async def list_classes(store: AcademicStateStore = Depends(get_store)) -> list[ClassGroup]:
    return store.state.classes


@router.post(
    "", response_model=MutationResponse[ClassGroup], status_code=status.HTTP_201_CREATED
)
async def create_class(
    class_data: ClassCreate, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Create a new class."""
    class_group = ClassGroup(**class_data.model_dump())
    state = store.dispatch(m.add_class, class_group)
    return mutation_result(store, state.find_class(class_group.id))


@router.get("/{class_id}", response_model=ClassGroup)
async def get_class(class_id: str, store: AcademicStateStore = Depends(get_store)) -> ClassGroup:
    return _get_class_or_404(store, class_id)


@router.put("/{class_id}", response_model=MutationResponse[ClassGroup])
async def update_class(
    class_id: str, class_update: ClassUpdate, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Update class information.

    Only updates fields that are explicitly provided.
    """
    state = store.dispatch(m.update_class, class_id, **class_update.model_dump(exclude_unset=True))
    return mutation_result(store, state.find_class(class_id))


@router.delete("/{class_id}", response_model=MutationResponse[None])
async def delete_class(
    class_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Delete a class together with its students, assessments, grades and attendance."""
    store.dispatch(m.delete_class, class_id)
    return mutation_result(store)


@router.get("/{class_id}/students", response_model=list[Student])
async def list_class_students(
    class_id: str, store: AcademicStateStore = Depends(get_store)
) -> list[Student]:
    _get_class_or_404(store, class_id)
    return store.state.students_in_class(class_id)


@router.post(
    "/{class_id}/students",
    response_model=MutationResponse[Student],
    status_code=status.HTTP_201_CREATED,
)
async def create_student(
    class_id: str, student_data: StudentCreate, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    student = Student(class_id=class_id, **student_data.model_dump())
    state = store.dispatch(m.add_student, student)
    return mutation_result(store, state.find_student(student.id))


@router.post(
    "/{class_id}/students/import",
    response_model=MutationResponse[list[Student]],
    status_code=status.HTTP_201_CREATED,
)
async def import_students(
    class_id: str, roster: RosterImport, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Bulk-add students from CSV lines of ``NIS,Nama,L/P``."""
    existing = {s.id for s in store.state.students}
    state = store.dispatch(m.import_students_csv, class_id, roster.csv_text)
    return mutation_result(store, [s for s in state.students if s.id not in existing])


@router.get("/{class_id}/students/{student_id}/analytics", response_model=StudentAnalytics)
async def get_student_analytics(
    class_id: str, student_id: str, store: AcademicStateStore = Depends(get_store)
) -> StudentAnalytics:
    """Score trend against the class average and per-type competency radar."""
    _get_class_or_404(store, class_id)
    return student_analytics(store.state, class_id, student_id)

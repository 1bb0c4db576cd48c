"""
Exam Bank API Endpoints

Exam packages and AI question generation.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from gurupintar.ai import AcademicAIService
from gurupintar.api.v1.deps import get_ai, get_store, mutation_result
from gurupintar.core.schemas import ExamPackage, MutationResponse
from gurupintar.core.schemas.requests import ExamGenerateRequest, ExamPackageSubmit
from gurupintar.store import AcademicStateStore
from gurupintar.store import mutations as m

router = APIRouter()


def _get_package_or_404(store: AcademicStateStore, package_id: str) -> ExamPackage:
    package = store.state.find_exam_package(package_id)
    if package is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exam package not found with ID: {package_id}",
        )
    return package


@router.get("", response_model=list[ExamPackage])
async def list_exam_packages(
    store: AcademicStateStore = Depends(get_store),
) -> list[ExamPackage]:
    return store.state.exam_packages


@router.post(
    "", response_model=MutationResponse[ExamPackage], status_code=status.HTTP_201_CREATED
)
async def create_exam_package(
    submission: ExamPackageSubmit, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    package = ExamPackage(
        **submission.model_dump(exclude={"questions"}), questions=submission.questions
    )
    state = store.dispatch(m.save_exam_package, package)
    return mutation_result(store, state.find_exam_package(package.id))


@router.get("/{package_id}", response_model=ExamPackage)
async def get_exam_package(
    package_id: str, store: AcademicStateStore = Depends(get_store)
) -> ExamPackage:
    return _get_package_or_404(store, package_id)


@router.put("/{package_id}", response_model=MutationResponse[ExamPackage])
async def update_exam_package(
    package_id: str,
    submission: ExamPackageSubmit,
    store: AcademicStateStore = Depends(get_store),
) -> MutationResponse[Any]:
    _get_package_or_404(store, package_id)
    package = ExamPackage(
        id=package_id,
        **submission.model_dump(exclude={"questions"}),
        questions=submission.questions,
    )
    state = store.dispatch(m.save_exam_package, package)
    return mutation_result(store, state.find_exam_package(package_id))


@router.delete("/{package_id}", response_model=MutationResponse[None])
async def delete_exam_package(
    package_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    store.dispatch(m.delete_exam_package, package_id)
    return mutation_result(store)


@router.post("/{package_id}/generate", response_model=MutationResponse[ExamPackage])
async def generate_questions(
    package_id: str,
    request: ExamGenerateRequest,
    store: AcademicStateStore = Depends(get_store),
    ai: AcademicAIService = Depends(get_ai),
) -> MutationResponse[Any]:
    """Generate questions with AI and add them to the package.

    Responds 502 when the AI reply is unavailable or unusable; the package is
    left unchanged and the request can simply be repeated.
    """
    _get_package_or_404(store, package_id)

    questions = await asyncio.to_thread(
        ai.generate_exam_questions, request.topic, request.level, request.count, request.type
    )

    # The package may have been edited or deleted while waiting on the AI
    state = store.dispatch(m.merge_exam_questions, package_id, questions)
    return mutation_result(store, state.find_exam_package(package_id))

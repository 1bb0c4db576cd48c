"""
Report API Endpoints

Dashboard statistics, report cards and AI narratives.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import asyncio

from fastapi import APIRouter, Depends, HTTPException, status

from gurupintar.ai import AcademicAIService
from gurupintar.analytics import (
    DashboardStats,
    FinalGradeRow,
    ReportCard,
    build_report_card,
    class_final_grades,
    dashboard_statistics,
)
from gurupintar.api.v1.deps import get_ai, get_store
from gurupintar.core.schemas import ClassGroup, FeedbackResponse
from gurupintar.store import AcademicStateStore

router = APIRouter()

# Grades sent to the AI for the school-wide insight
INSIGHT_SAMPLE_SIZE = 100


def _get_class_or_404(store: AcademicStateStore, class_id: str) -> ClassGroup:
    class_group = store.state.find_class(class_id)
    if class_group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Class not found with ID: {class_id}",
        )
    return class_group


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(store: AcademicStateStore = Depends(get_store)) -> DashboardStats:
    return dashboard_statistics(store.state)


@router.post("/dashboard/insight", response_model=FeedbackResponse)
async def get_dashboard_insight(
    store: AcademicStateStore = Depends(get_store),
    ai: AcademicAIService = Depends(get_ai),
) -> FeedbackResponse:
    """AI teaching recommendations from a sample of all grades."""
    scores = [g.score for g in store.state.grades[:INSIGHT_SAMPLE_SIZE]]
    text = await asyncio.to_thread(ai.analyze_class_trends, "Semua Kelas", scores)
    return FeedbackResponse(text=text)


@router.get("/classes/{class_id}", response_model=list[FinalGradeRow])
async def list_final_grades(
    class_id: str, store: AcademicStateStore = Depends(get_store)
) -> list[FinalGradeRow]:
    _get_class_or_404(store, class_id)
    return class_final_grades(store.state, class_id)


@router.post("/classes/{class_id}/trends", response_model=FeedbackResponse)
async def get_class_trends(
    class_id: str,
    store: AcademicStateStore = Depends(get_store),
    ai: AcademicAIService = Depends(get_ai),
) -> FeedbackResponse:
    """AI teaching recommendations from the grades of one class."""
    class_group = _get_class_or_404(store, class_id)
    student_ids = {s.id for s in store.state.students_in_class(class_id)}
    scores = [g.score for g in store.state.grades if g.student_id in student_ids]

    text = await asyncio.to_thread(ai.analyze_class_trends, class_group.name, scores)
    return FeedbackResponse(text=text)


@router.get("/classes/{class_id}/students/{student_id}", response_model=ReportCard)
async def get_report_card(
    class_id: str, student_id: str, store: AcademicStateStore = Depends(get_store)
) -> ReportCard:
    return build_report_card(store.state, class_id, student_id)


@router.post("/classes/{class_id}/students/{student_id}/feedback", response_model=FeedbackResponse)
async def generate_feedback(
    class_id: str,
    student_id: str,
    store: AcademicStateStore = Depends(get_store),
    ai: AcademicAIService = Depends(get_ai),
) -> FeedbackResponse:
    """Draft the report-card narrative from the student's strengths and weaknesses."""
    card = build_report_card(store.state, class_id, student_id)
    text = await asyncio.to_thread(
        ai.generate_student_feedback,
        card.student.name,
        card.final_grade,
        card.strengths,
        card.weaknesses,
    )
    return FeedbackResponse(text=text)

"""
Attendance API Endpoints

Daily attendance per class, monthly recaps and teaching journals.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gurupintar.analytics import AttendanceRecap, attendance_recap, attendance_sheet
from gurupintar.api.v1.deps import get_store, mutation_result
from gurupintar.core.schemas import (
    AttendanceRecord,
    DailyAttendance,
    MutationResponse,
    TeachingJournal,
)
from gurupintar.core.schemas.requests import DailyAttendanceSubmit, JournalSubmit
from gurupintar.store import AcademicStateStore
from gurupintar.store import mutations as m

router = APIRouter()
journals_router = APIRouter()


def _require_class(store: AcademicStateStore, class_id: str) -> None:
    if store.state.find_class(class_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Class not found with ID: {class_id}",
        )


# ============================================================================
# Daily attendance
# ============================================================================


@router.get("/{class_id}/recap", response_model=AttendanceRecap)
async def get_attendance_recap(
    class_id: str,
    month: str = Query(..., description="Month as YYYY-MM"),
    store: AcademicStateStore = Depends(get_store),
) -> AttendanceRecap:
    """Monthly tallies per student with present rate ((H + T) / sessions)."""
    _require_class(store, class_id)
    return attendance_recap(store.state, class_id, month)


@router.get("/{class_id}/days/{date}", response_model=list[AttendanceRecord])
async def get_attendance_sheet(
    class_id: str, date: str, store: AcademicStateStore = Depends(get_store)
) -> list[AttendanceRecord]:
    """Attendance to edit for one day; students without a record default to present."""
    _require_class(store, class_id)
    return attendance_sheet(store.state, class_id, date)


@router.put("/{class_id}", response_model=MutationResponse[DailyAttendance])
async def save_attendance(
    class_id: str,
    submission: DailyAttendanceSubmit,
    store: AcademicStateStore = Depends(get_store),
) -> MutationResponse[Any]:
    """Save one day's attendance, replacing an earlier save for the same date."""
    state = store.dispatch(
        m.save_daily_attendance, class_id, submission.date, submission.records
    )
    entry_id = DailyAttendance.make_id(class_id, submission.date.strip())
    return mutation_result(store, next(d for d in state.daily_attendance if d.id == entry_id))


@router.delete("/{class_id}/days/{date}", response_model=MutationResponse[None])
async def delete_attendance(
    class_id: str, date: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    store.dispatch(m.delete_daily_attendance, class_id, date)
    return mutation_result(store)


# ============================================================================
# Teaching journals
# ============================================================================


@journals_router.get("", response_model=list[TeachingJournal])
async def list_journals(
    class_id: str | None = Query(default=None, alias="classId"),
    store: AcademicStateStore = Depends(get_store),
) -> list[TeachingJournal]:
    """List journals, newest first."""
    journals = store.state.journals
    if class_id:
        journals = [j for j in journals if j.class_id == class_id]
    return journals


@journals_router.post(
    "", response_model=MutationResponse[TeachingJournal], status_code=status.HTTP_201_CREATED
)
async def create_journal(
    journal_data: JournalSubmit, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Record a lesson; students missing from the attendance list are marked present."""
    journal = TeachingJournal(**journal_data.model_dump())
    state = store.dispatch(m.save_journal, journal)
    return mutation_result(store, next(j for j in state.journals if j.id == journal.id))


@journals_router.put("/{journal_id}", response_model=MutationResponse[TeachingJournal])
async def update_journal(
    journal_id: str, journal_data: JournalSubmit, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    if not any(j.id == journal_id for j in store.state.journals):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Journal not found with ID: {journal_id}",
        )

    journal = TeachingJournal(id=journal_id, **journal_data.model_dump())
    state = store.dispatch(m.save_journal, journal)
    return mutation_result(store, next(j for j in state.journals if j.id == journal_id))


@journals_router.delete("/{journal_id}", response_model=MutationResponse[None])
async def delete_journal(
    journal_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    store.dispatch(m.delete_journal, journal_id)
    return mutation_result(store)

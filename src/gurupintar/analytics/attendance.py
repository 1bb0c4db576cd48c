"""
Attendance Recap

Monthly attendance tallies per student and for the whole class.
"""

from __future__ import annotations

from pydantic import Field

from gurupintar.core.schemas import (
    ATTENDANCE_STATUSES,
    STATUS_LABELS,
    AppState,
    AttendanceRecord,
    RecordModel,
)
from gurupintar.core.validation import validate_iso_date, validate_month

from .statistics import round_half_up

# Statuses counted as present
PRESENT_STATUSES = ("H", "T")


class StudentAttendance(RecordModel):
    student_id: str
    name: str
    counts: dict[str, int] = Field(default_factory=lambda: dict.fromkeys(ATTENDANCE_STATUSES, 0))
    total: int = 0
    present_rate: int = 0


class StatusTotal(RecordModel):
    status: str
    label: str
    count: int


class AttendanceRecap(RecordModel):
    class_id: str
    month: str
    total_days: int
    students: list[StudentAttendance]
    class_totals: list[StatusTotal]


def present_rate(present: int, total_days: int) -> int:
    """Percentage of sessions attended (H or T), rounded half up; 0 without sessions."""
    if total_days <= 0:
        return 0
    return int(round_half_up(present / total_days * 100))


def attendance_recap(state: AppState, class_id: str, month: str) -> AttendanceRecap:
    """
    Tally a class's attendance for one month.

    Sessions are the daily attendance entries of the class whose date starts
    with the ``YYYY-MM`` prefix. Records of students no longer in the class
    are ignored.

    Args:
        state: Snapshot
        class_id: Class to recap
        month: Month prefix, ``YYYY-MM``

    Returns:
        Per-student tallies and the class totals of every status that occurs
    """
    month = validate_month(month)
    sessions = [
        d for d in state.daily_attendance if d.class_id == class_id and d.date.startswith(month)
    ]
    roster = state.students_in_class(class_id)
    tallies = {s.id: dict.fromkeys(ATTENDANCE_STATUSES, 0) for s in roster}

    for session in sessions:
        for record in session.records:
            if record.student_id in tallies:
                tallies[record.student_id][record.status] += 1

    total_days = len(sessions)
    students = [
        StudentAttendance(
            student_id=s.id,
            name=s.name,
            counts=tallies[s.id],
            total=sum(tallies[s.id].values()),
            present_rate=present_rate(
                sum(tallies[s.id][status] for status in PRESENT_STATUSES), total_days
            ),
        )
        for s in roster
    ]

    class_totals = [
        StatusTotal(
            status=status,
            label=STATUS_LABELS[status],
            count=sum(counts[status] for counts in tallies.values()),
        )
        for status in ATTENDANCE_STATUSES
    ]

    return AttendanceRecap(
        class_id=class_id,
        month=month,
        total_days=total_days,
        students=students,
        class_totals=[t for t in class_totals if t.count > 0],
    )


def attendance_sheet(state: AppState, class_id: str, date: str) -> list[AttendanceRecord]:
    """Records to edit for (class, date): the saved status per student, else present."""
    date = validate_iso_date(date, "Attendance date")
    entry = next(
        (d for d in state.daily_attendance if d.class_id == class_id and d.date == date), None
    )
    saved = {r.student_id: r for r in entry.records} if entry else {}

    return [
        saved.get(s.id) or AttendanceRecord(student_id=s.id, status="H")
        for s in state.students_in_class(class_id)
    ]

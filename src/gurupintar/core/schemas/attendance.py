"""
Attendance and Teaching Journal Schemas
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import RecordModel, new_id

AttendanceStatus = Literal["H", "S", "I", "A", "T"]

# Hadir, Sakit, Izin, Alpha, Terlambat
ATTENDANCE_STATUSES: tuple[AttendanceStatus, ...] = ("H", "S", "I", "A", "T")

STATUS_LABELS: dict[str, str] = {
    "H": "Hadir",
    "S": "Sakit",
    "I": "Izin",
    "A": "Alpha",
    "T": "Terlambat",
}


class AttendanceRecord(RecordModel):
    student_id: str
    status: AttendanceStatus = "H"
    note: str | None = None


class DailyAttendance(RecordModel):
    """Attendance of one class on one date, keyed by (class_id, date)."""

    id: str
    date: str
    class_id: str
    records: list[AttendanceRecord] = Field(default_factory=list)

    @staticmethod
    def make_id(class_id: str, date: str) -> str:
        return f"{class_id}_{date}"


class TeachingJournal(RecordModel):
    """Lesson log with its own attendance snapshot.

    The snapshot is independent of ``DailyAttendance`` for the same class and
    date; the two are not kept consistent.
    """

    id: str = Field(default_factory=new_id)
    class_id: str
    date: str
    time_start: str = "07:00"
    time_end: str = "08:30"
    subject: str
    topic: str
    activity: str = ""
    notes: str = ""
    attendance: list[AttendanceRecord] = Field(default_factory=list)

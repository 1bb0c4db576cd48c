"""
Academic Record Schemas

Classes, students, assessments and grades.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from .base import RecordModel, new_id


class AssessmentType(str, Enum):
    """Assessment categories; values are the strings stored in snapshots."""

    PH = "Penilaian Harian"
    PTS = "Penilaian Tengah Semester"
    PAS = "Penilaian Akhir Semester"
    TUGAS = "Tugas/Proyek"
    SIKAP = "Sikap"
    KETERAMPILAN = "Keterampilan"

    @property
    def short_name(self) -> str:
        """Abbreviation used for chart axes (PH, PTS, ...)."""
        return self.name


class Gender(str, Enum):
    L = "Laki-laki"
    P = "Perempuan"


class ClassGroup(RecordModel):
    """A class (rombongan belajar), e.g. "X IPA 1" for 2023/2024."""

    id: str = Field(default_factory=new_id)
    name: str
    grade_level: int = 10
    year: str = ""


class Student(RecordModel):
    """A student enrolled in one class. NIS is not required to be unique."""

    id: str = Field(default_factory=new_id)
    nis: str
    name: str
    gender: Gender = Gender.L
    class_id: str
    photo_url: str | None = None
    birth_date: str | None = None
    parent_name: str | None = None
    parent_phone: str | None = None
    address: str | None = None
    email: str | None = None
    notes: str | None = None


class Assessment(RecordModel):
    """A graded activity for one class.

    ``weight`` is captured for display only; report-card aggregation does not
    use it.
    """

    id: str = Field(default_factory=new_id)
    title: str
    type: AssessmentType = AssessmentType.PH
    class_id: str
    date: str
    max_score: float = 100
    weight: float = 10


class Grade(RecordModel):
    """Score of one student on one assessment, keyed by (assessment_id, student_id)."""

    assessment_id: str
    student_id: str
    score: float
    feedback: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.assessment_id, self.student_id)

"""
API Request Schemas

Request bodies for the v1 endpoints. Required-field checks that must re-prompt
the user (empty names, missing dates) live in ``core.validation`` so that the
mutation functions enforce them no matter who calls them.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .academic import AssessmentType, Gender
from .attendance import AttendanceRecord
from .base import RequestModel
from .exams import ExamQuestion
from .forum import ForumRole
from .questionnaires import Question


# Classes & students
class ClassCreate(RequestModel):
    name: str = ""
    grade_level: int = 10
    year: str = ""


class ClassUpdate(RequestModel):
    name: str | None = None
    grade_level: int | None = None
    year: str | None = None


class StudentCreate(RequestModel):
    nis: str = ""
    name: str = ""
    gender: Gender = Gender.L
    photo_url: str | None = None
    birth_date: str | None = None
    parent_name: str | None = None
    parent_phone: str | None = None
    address: str | None = None
    email: str | None = None
    notes: str | None = None


class StudentUpdate(RequestModel):
    nis: str | None = None
    name: str | None = None
    gender: Gender | None = None
    photo_url: str | None = None
    birth_date: str | None = None
    parent_name: str | None = None
    parent_phone: str | None = None
    address: str | None = None
    email: str | None = None
    notes: str | None = None


class RosterImport(RequestModel):
    """CSV text, one ``NIS,Nama,L/P`` line per student."""

    csv_text: str


# Assessments & grades
class AssessmentCreate(RequestModel):
    class_id: str
    title: str = ""
    type: AssessmentType = AssessmentType.PH
    date: str = ""
    max_score: float = Field(default=100, gt=0)
    weight: float = Field(default=10, ge=0, le=100)


class AssessmentUpdate(RequestModel):
    title: str | None = None
    type: AssessmentType | None = None
    date: str | None = None
    max_score: float | None = Field(default=None, gt=0)
    weight: float | None = Field(default=None, ge=0, le=100)


class GradesSubmit(RequestModel):
    """Scores keyed by student id."""

    scores: dict[str, float]


class PendingScores(RequestModel):
    """Unsaved scores used for live grading statistics."""

    scores: dict[str, float] = Field(default_factory=dict)


# Attendance & journals
class DailyAttendanceSubmit(RequestModel):
    date: str
    records: list[AttendanceRecord]


class JournalSubmit(RequestModel):
    class_id: str = ""
    date: str = ""
    time_start: str = "07:00"
    time_end: str = "08:30"
    subject: str = ""
    topic: str = ""
    activity: str = ""
    notes: str = ""
    attendance: list[AttendanceRecord] = Field(default_factory=list)


# Questionnaires
class QuestionnaireSubmit(RequestModel):
    title: str = ""
    description: str = ""
    questions: list[Question] = Field(default_factory=list)


class ResponseSubmit(RequestModel):
    student_id: str
    answers: dict[str, int]


# Exams
class ExamPackageSubmit(RequestModel):
    title: str = ""
    subject: str = ""
    grade_level: int = 10
    questions: list[ExamQuestion] = Field(default_factory=list)


class ExamGenerateRequest(RequestModel):
    topic: str
    level: str = "SMA Kelas 10"
    count: int = Field(default=5, ge=1, le=20)
    type: Literal["MULTIPLE_CHOICE", "ESSAY"] = "MULTIPLE_CHOICE"


# Forum
class ForumPostCreate(RequestModel):
    content: str = ""
    author: str | None = None
    role: ForumRole = "STUDENT"


class ForumCommentCreate(RequestModel):
    content: str = ""
    author: str | None = None
    role: ForumRole = "TEACHER"


# Settings & auth
class SettingsUpdate(RequestModel):
    kkm: float | None = None
    school_name: str | None = None
    teacher_name: str | None = None


class LoginRequest(RequestModel):
    identifier: str
    password: str = ""

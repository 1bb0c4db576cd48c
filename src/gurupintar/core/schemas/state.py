"""
Application Snapshot Schema

``AppState`` is the whole application: one document, persisted under a single
storage key and replaced as a unit on every mutation.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .academic import Assessment, ClassGroup, Grade, Student
from .attendance import DailyAttendance, TeachingJournal
from .base import RecordModel
from .exams import ExamPackage
from .forum import ForumPost
from .questionnaires import Questionnaire, QuestionnaireResponse

SNAPSHOT_VERSION = 2


class SchoolSettings(RecordModel):
    """Process-wide school configuration (singleton inside the snapshot)."""

    kkm: float = 75
    school_name: str = ""
    teacher_name: str = ""


class AppState(RecordModel):
    version: int = SNAPSHOT_VERSION
    classes: list[ClassGroup] = Field(default_factory=list)
    students: list[Student] = Field(default_factory=list)
    assessments: list[Assessment] = Field(default_factory=list)
    grades: list[Grade] = Field(default_factory=list)
    journals: list[TeachingJournal] = Field(default_factory=list)
    daily_attendance: list[DailyAttendance] = Field(default_factory=list)
    questionnaires: list[Questionnaire] = Field(default_factory=list)
    questionnaire_responses: list[QuestionnaireResponse] = Field(default_factory=list)
    exam_packages: list[ExamPackage] = Field(default_factory=list)
    forum_posts: list[ForumPost] = Field(default_factory=list)
    settings: SchoolSettings = Field(default_factory=SchoolSettings)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> AppState:
        return cls.model_validate(document)

    # Lookups used by mutations and analytics
    def find_class(self, class_id: str) -> ClassGroup | None:
        return next((c for c in self.classes if c.id == class_id), None)

    def find_student(self, student_id: str) -> Student | None:
        return next((s for s in self.students if s.id == student_id), None)

    def find_assessment(self, assessment_id: str) -> Assessment | None:
        return next((a for a in self.assessments if a.id == assessment_id), None)

    def find_grade(self, assessment_id: str, student_id: str) -> Grade | None:
        return next(
            (
                g
                for g in self.grades
                if g.assessment_id == assessment_id and g.student_id == student_id
            ),
            None,
        )

    def find_questionnaire(self, questionnaire_id: str) -> Questionnaire | None:
        return next((q for q in self.questionnaires if q.id == questionnaire_id), None)

    def find_exam_package(self, package_id: str) -> ExamPackage | None:
        return next((e for e in self.exam_packages if e.id == package_id), None)

    def students_in_class(self, class_id: str) -> list[Student]:
        return [s for s in self.students if s.class_id == class_id]

    def assessments_in_class(self, class_id: str) -> list[Assessment]:
        return [a for a in self.assessments if a.class_id == class_id]

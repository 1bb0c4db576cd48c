"""Pydantic schemas for snapshot records and API validation."""

from .academic import Assessment, AssessmentType, ClassGroup, Gender, Grade, Student
from .attendance import (
    ATTENDANCE_STATUSES,
    STATUS_LABELS,
    AttendanceRecord,
    AttendanceStatus,
    DailyAttendance,
    TeachingJournal,
)
from .base import RecordModel, RequestModel, new_id
from .exams import (
    EssayQuestion,
    ExamOption,
    ExamPackage,
    ExamQuestion,
    MultipleChoiceQuestion,
    TrueFalseQuestion,
    exam_question_adapter,
)
from .forum import ForumComment, ForumPost, ForumRole
from .questionnaires import Question, Questionnaire, QuestionnaireResponse
from .responses import FeedbackResponse, MutationResponse
from .state import SNAPSHOT_VERSION, AppState, SchoolSettings

__all__ = [
    # Base
    "RecordModel",
    "RequestModel",
    "new_id",
    # Academic
    "AssessmentType",
    "Gender",
    "ClassGroup",
    "Student",
    "Assessment",
    "Grade",
    # Attendance
    "ATTENDANCE_STATUSES",
    "STATUS_LABELS",
    "AttendanceStatus",
    "AttendanceRecord",
    "DailyAttendance",
    "TeachingJournal",
    # Questionnaires
    "Question",
    "Questionnaire",
    "QuestionnaireResponse",
    # Exams
    "ExamOption",
    "MultipleChoiceQuestion",
    "EssayQuestion",
    "TrueFalseQuestion",
    "ExamQuestion",
    "ExamPackage",
    "exam_question_adapter",
    # Forum
    "ForumRole",
    "ForumComment",
    "ForumPost",
    # Responses
    "MutationResponse",
    "FeedbackResponse",
    # Snapshot
    "SNAPSHOT_VERSION",
    "SchoolSettings",
    "AppState",
]

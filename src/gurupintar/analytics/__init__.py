"""Derived views over the application snapshot."""

from .attendance import AttendanceRecap, StudentAttendance, attendance_recap, attendance_sheet
from .reports import (
    BreakdownRow,
    FinalGradeRow,
    ReportCard,
    build_report_card,
    class_final_grades,
    final_grade,
    grade_breakdown,
    predicate,
    strengths_and_weaknesses,
)
from .statistics import (
    AssessmentStats,
    DashboardStats,
    StudentAnalytics,
    assessment_statistics,
    average,
    class_average,
    dashboard_statistics,
    pass_fail,
    round_half_up,
    score_histogram,
    student_analytics,
    type_performance,
)
from .talent import StudentResult, category_scores, questionnaire_results

__all__ = [
    # Statistics
    "average",
    "pass_fail",
    "score_histogram",
    "round_half_up",
    "type_performance",
    "class_average",
    "assessment_statistics",
    "student_analytics",
    "dashboard_statistics",
    "AssessmentStats",
    "StudentAnalytics",
    "DashboardStats",
    # Attendance
    "attendance_recap",
    "attendance_sheet",
    "AttendanceRecap",
    "StudentAttendance",
    # Reports
    "predicate",
    "final_grade",
    "grade_breakdown",
    "strengths_and_weaknesses",
    "build_report_card",
    "class_final_grades",
    "BreakdownRow",
    "FinalGradeRow",
    "ReportCard",
    # Questionnaires
    "category_scores",
    "questionnaire_results",
    "StudentResult",
]

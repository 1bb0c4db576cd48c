"""
Report Cards

Per-student grade breakdown by assessment type, final grade and predicate.
"""

from __future__ import annotations

from typing import NamedTuple

from gurupintar.core.schemas import AppState, AssessmentType, ClassGroup, RecordModel, Student
from gurupintar.core.validation import RecordNotFoundError

from .statistics import average, round_half_up

STRENGTH_THRESHOLD = 85

# (minimum average, predicate); first match wins
PREDICATES: list[tuple[float, str]] = [
    (90, "A (Sangat Baik)"),
    (80, "B (Baik)"),
    (70, "C (Cukup)"),
]


def predicate(score: float | None) -> str:
    if score is None or score <= 0:
        return "-"
    for minimum, label in PREDICATES:
        if score >= minimum:
            return label
    return "D (Kurang)"


class BreakdownRow(RecordModel):
    type: AssessmentType
    average: int | None
    predicate: str


class StrengthsWeaknesses(NamedTuple):
    strengths: list[AssessmentType]
    weaknesses: list[AssessmentType]


class ReportCard(RecordModel):
    school_name: str
    teacher_name: str
    class_group: ClassGroup
    student: Student
    breakdown: list[BreakdownRow]
    final_grade: float
    final_predicate: str
    strengths: list[AssessmentType]
    weaknesses: list[AssessmentType]


def final_grade(state: AppState, class_id: str, student_id: str) -> float:
    """
    Unweighted mean of the student's per-type averages.

    Only types with at least one graded assessment in the class count.
    Assessment weights are not applied.

    Returns:
        Final grade rounded to one decimal, 0 if the student has no grades
    """
    by_type: dict[AssessmentType, list[float]] = {}
    for assessment in state.assessments_in_class(class_id):
        grade = state.find_grade(assessment.id, student_id)
        if grade is not None:
            by_type.setdefault(assessment.type, []).append(grade.score)

    return round_half_up(average(average(scores) for scores in by_type.values()), 1)


def grade_breakdown(state: AppState, class_id: str, student_id: str) -> list[BreakdownRow]:
    """Per-type average over all class assessments of that type.

    Ungraded assessments count as 0. A type with no assessments in the class
    has no average.
    """
    rows = []
    for assessment_type in AssessmentType:
        assessments = [
            a for a in state.assessments_in_class(class_id) if a.type == assessment_type
        ]
        if not assessments:
            rows.append(BreakdownRow(type=assessment_type, average=None, predicate="-"))
            continue

        scores = []
        for assessment in assessments:
            grade = state.find_grade(assessment.id, student_id)
            scores.append(grade.score if grade else 0)

        rounded = int(round_half_up(average(scores)))
        rows.append(
            BreakdownRow(type=assessment_type, average=rounded, predicate=predicate(rounded))
        )

    return rows


def strengths_and_weaknesses(breakdown: list[BreakdownRow], kkm: float) -> StrengthsWeaknesses:
    scored = [row for row in breakdown if row.average is not None]
    return StrengthsWeaknesses(
        strengths=[row.type for row in scored if row.average >= STRENGTH_THRESHOLD],
        weaknesses=[row.type for row in scored if row.average < kkm],
    )


def build_report_card(state: AppState, class_id: str, student_id: str) -> ReportCard:
    """
    Assemble the printable report card of one student.

    Raises:
        RecordNotFoundError: If the class is unknown or the student is not in it
    """
    class_group = state.find_class(class_id)
    if class_group is None:
        raise RecordNotFoundError("Class", class_id)

    student = state.find_student(student_id)
    if student is None or student.class_id != class_id:
        raise RecordNotFoundError("Student", student_id)

    breakdown = grade_breakdown(state, class_id, student_id)
    summary = strengths_and_weaknesses(breakdown, state.settings.kkm)
    final = final_grade(state, class_id, student_id)

    return ReportCard(
        school_name=state.settings.school_name,
        teacher_name=state.settings.teacher_name,
        class_group=class_group,
        student=student,
        breakdown=breakdown,
        final_grade=final,
        final_predicate=predicate(final),
        strengths=summary.strengths,
        weaknesses=summary.weaknesses,
    )


class FinalGradeRow(RecordModel):
    student_id: str
    nis: str
    name: str
    final_grade: float
    predicate: str


def class_final_grades(state: AppState, class_id: str) -> list[FinalGradeRow]:
    """Final grade of every student in the class, in roster order."""
    rows = []
    for student in state.students_in_class(class_id):
        final = final_grade(state, class_id, student.id)
        rows.append(
            FinalGradeRow(
                student_id=student.id,
                nis=student.nis,
                name=student.name,
                final_grade=final,
                predicate=predicate(final),
            )
        )
    return rows

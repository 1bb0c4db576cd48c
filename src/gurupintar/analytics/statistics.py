"""
Grade Statistics

Pure aggregate views over a snapshot. Every function recomputes from scratch;
an empty scope yields 0 (or None where "no statistics" is meaningful), never
an exception.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from pydantic import Field

from gurupintar.core.schemas import AppState, AssessmentType, RecordModel
from gurupintar.core.validation import clamp_score

# (label, exclusive upper bound); scanned in order, first match wins
SCORE_BUCKETS: list[tuple[str, float]] = [
    ("0-59", 60),
    ("60-74", 75),
    ("75-89", 90),
    ("90-100", float("inf")),
]


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves up: 78.5 becomes 79, where built-in ``round`` gives 78."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def average(scores: Iterable[float]) -> float:
    values = list(scores)
    return sum(values) / len(values) if values else 0


class PassFail(NamedTuple):
    passed: int
    failed: int


def pass_fail(scores: Sequence[float], kkm: float) -> PassFail:
    passed = sum(1 for score in scores if score >= kkm)
    return PassFail(passed=passed, failed=len(scores) - passed)


class ScoreBucket(RecordModel):
    label: str
    count: int = 0


def score_histogram(scores: Iterable[float]) -> list[ScoreBucket]:
    """Count scores into the fixed 0-59 / 60-74 / 75-89 / 90-100 buckets."""
    counts = [0] * len(SCORE_BUCKETS)
    for score in scores:
        for index, (_, upper) in enumerate(SCORE_BUCKETS):
            if score < upper:
                counts[index] += 1
                break
    return [
        ScoreBucket(label=label, count=count)
        for (label, _), count in zip(SCORE_BUCKETS, counts, strict=True)
    ]


# ============================================================================
# Result models
# ============================================================================


class TypeScore(RecordModel):
    type: AssessmentType
    label: str
    average: float


class AssessmentStats(RecordModel):
    average: float
    highest: float
    lowest: float
    passed: int
    failed: int
    distribution: list[ScoreBucket]
    count: int


class TrendPoint(RecordModel):
    assessment_id: str
    title: str
    date: str
    student_score: float | None
    class_average: float


class StudentAnalytics(RecordModel):
    trend: list[TrendPoint] = Field(default_factory=list)
    radar: list[TypeScore] = Field(default_factory=list)


class ClassAverage(RecordModel):
    class_id: str
    name: str
    average: float


class DashboardStats(RecordModel):
    total_students: int
    total_classes: int
    global_average: float
    below_kkm_count: int
    class_averages: list[ClassAverage]
    type_performance: list[TypeScore]


# ============================================================================
# Snapshot views
# ============================================================================


def type_performance(state: AppState) -> list[TypeScore]:
    """Average of all grades per assessment type; types without grades report 0."""
    type_by_assessment = {a.id: a.type for a in state.assessments}
    scores: dict[AssessmentType, list[float]] = {t: [] for t in AssessmentType}

    for grade in state.grades:
        assessment_type = type_by_assessment.get(grade.assessment_id)
        if assessment_type is not None:
            scores[assessment_type].append(grade.score)

    return [
        TypeScore(type=t, label=t.short_name, average=round_half_up(average(scores[t]), 1))
        for t in AssessmentType
    ]


def class_average(state: AppState, class_id: str) -> float:
    """Mean of every grade held by students of the class."""
    student_ids = {s.id for s in state.students_in_class(class_id)}
    return average(g.score for g in state.grades if g.student_id in student_ids)


def assessment_statistics(
    state: AppState, assessment_id: str, pending: Mapping[str, float] | None = None
) -> AssessmentStats | None:
    """Live grading statistics over the class roster.

    Pending (unsaved) scores take precedence over saved grades and are clamped
    the way a save would clamp them. Students with neither are left out.

    Returns:
        Statistics, or None when the assessment is unknown or has no scores
    """
    assessment = state.find_assessment(assessment_id)
    if assessment is None:
        return None

    pending = pending or {}
    saved = {g.student_id: g.score for g in state.grades if g.assessment_id == assessment_id}

    scores: list[float] = []
    for student in state.students_in_class(assessment.class_id):
        if student.id in pending:
            scores.append(clamp_score(pending[student.id], assessment.max_score))
        elif student.id in saved:
            scores.append(saved[student.id])

    if not scores:
        return None

    result = pass_fail(scores, state.settings.kkm)
    return AssessmentStats(
        average=average(scores),
        highest=max(scores),
        lowest=min(scores),
        passed=result.passed,
        failed=result.failed,
        distribution=score_histogram(scores),
        count=len(scores),
    )


def student_analytics(state: AppState, class_id: str, student_id: str) -> StudentAnalytics:
    """Chronological trend against the class average, plus per-type radar."""
    assessments = sorted(state.assessments_in_class(class_id), key=lambda a: a.date)
    grades_by_assessment: dict[str, list[float]] = {}
    student_scores: dict[str, float] = {}

    for grade in state.grades:
        grades_by_assessment.setdefault(grade.assessment_id, []).append(grade.score)
        if grade.student_id == student_id:
            student_scores[grade.assessment_id] = grade.score

    trend = [
        TrendPoint(
            assessment_id=a.id,
            title=a.title,
            date=a.date,
            student_score=student_scores.get(a.id),
            class_average=round_half_up(average(grades_by_assessment.get(a.id, [])), 1),
        )
        for a in assessments
    ]

    by_type: dict[AssessmentType, list[float]] = {}
    for a in assessments:
        if a.id in student_scores:
            by_type.setdefault(a.type, []).append(student_scores[a.id])

    radar = [
        TypeScore(type=t, label=t.short_name, average=average(by_type[t]))
        for t in AssessmentType
        if by_type.get(t)
    ]

    return StudentAnalytics(trend=trend, radar=radar)


def dashboard_statistics(state: AppState) -> DashboardStats:
    scores = [g.score for g in state.grades]
    kkm = state.settings.kkm

    return DashboardStats(
        total_students=len(state.students),
        total_classes=len(state.classes),
        global_average=round_half_up(average(scores), 1),
        below_kkm_count=sum(1 for score in scores if score < kkm),
        class_averages=[
            ClassAverage(
                class_id=c.id,
                name=c.name,
                average=round_half_up(class_average(state, c.id), 1),
            )
            for c in state.classes
        ],
        type_performance=type_performance(state),
    )

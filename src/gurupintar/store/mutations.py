"""
State Mutations

Every operation takes the current snapshot plus constructed values and returns
a new snapshot. Nothing is modified in place: records are frozen and arrays are
rebuilt. Records that an operation does not touch are carried over as the same
objects.

Validation happens before the new snapshot is built, so a failing operation
raises ``ValidationError`` and the caller keeps the snapshot it passed in.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

from gurupintar.core.schemas import (
    AppState,
    Assessment,
    AttendanceRecord,
    ClassGroup,
    DailyAttendance,
    ExamPackage,
    ExamQuestion,
    ForumComment,
    ForumPost,
    Gender,
    Grade,
    Questionnaire,
    QuestionnaireResponse,
    RecordModel,
    Student,
    TeachingJournal,
)
from gurupintar.core.validation import (
    RecordNotFoundError,
    ValidationError,
    clamp_score,
    validate_answers,
    validate_exam_question,
    validate_iso_date,
    validate_kkm,
    validate_required,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=RecordModel)


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


# ============================================================================
# Array helpers
# ============================================================================


def _replace_by_id(records: list[R], record_id: str, update: Callable[[R], R]) -> list[R]:
    return [
        update(record) if record.id == record_id else record  # type: ignore[attr-defined]
        for record in records
    ]


def _without_id(records: list[R], record_id: str) -> list[R]:
    return [record for record in records if record.id != record_id]  # type: ignore[attr-defined]


def _upsert(records: list[R], new: R, key: Callable[[R], Hashable]) -> list[R]:
    """Replace the record with the same composite key in place, or append."""
    new_key = key(new)
    for index, record in enumerate(records):
        if key(record) == new_key:
            return [*records[:index], new, *records[index + 1 :]]
    return [*records, new]


def _apply_changes(record: R, changes: Mapping[str, Any], *, immutable: Iterable[str] = ()) -> R:
    """Copy a record with field changes, rejecting unknown or locked fields."""
    locked = {"id", *immutable}
    for field in changes:
        if field not in type(record).model_fields or field in locked:
            raise ValidationError(f"Field cannot be changed: {field}")
    return record.model_copy(update=dict(changes))


def _require_class(state: AppState, class_id: str) -> ClassGroup:
    class_group = state.find_class(class_id)
    if class_group is None:
        raise RecordNotFoundError("Class", class_id)
    return class_group


def _require_student(state: AppState, student_id: str) -> Student:
    student = state.find_student(student_id)
    if student is None:
        raise RecordNotFoundError("Student", student_id)
    return student


def _require_assessment(state: AppState, assessment_id: str) -> Assessment:
    assessment = state.find_assessment(assessment_id)
    if assessment is None:
        raise RecordNotFoundError("Assessment", assessment_id)
    return assessment


def _require_id(records: Iterable[RecordModel], record_id: str, entity: str) -> None:
    if not any(record.id == record_id for record in records):  # type: ignore[attr-defined]
        raise RecordNotFoundError(entity, record_id)


def _strip_student_records(
    records: list[AttendanceRecord], student_ids: set[str]
) -> list[AttendanceRecord]:
    return [record for record in records if record.student_id not in student_ids]


# ============================================================================
# Classes
# ============================================================================


def add_class(state: AppState, class_group: ClassGroup) -> AppState:
    name = validate_required(class_group.name, "Class name")
    return state.model_copy(
        update={"classes": [*state.classes, class_group.model_copy(update={"name": name})]}
    )


def update_class(state: AppState, class_id: str, **changes: Any) -> AppState:
    _require_class(state, class_id)
    if "name" in changes:
        changes["name"] = validate_required(changes["name"], "Class name")

    return state.model_copy(
        update={
            "classes": _replace_by_id(
                state.classes, class_id, lambda c: _apply_changes(c, changes)
            )
        }
    )


def delete_class(state: AppState, class_id: str) -> AppState:
    """Delete a class with its students, assessments and everything hanging off them."""
    _require_class(state, class_id)
    student_ids = {s.id for s in state.students if s.class_id == class_id}
    assessment_ids = {a.id for a in state.assessments if a.class_id == class_id}

    return state.model_copy(
        update={
            "classes": _without_id(state.classes, class_id),
            "students": [s for s in state.students if s.class_id != class_id],
            "assessments": [a for a in state.assessments if a.class_id != class_id],
            "grades": [
                g
                for g in state.grades
                if g.student_id not in student_ids and g.assessment_id not in assessment_ids
            ],
            "daily_attendance": [d for d in state.daily_attendance if d.class_id != class_id],
            "journals": [j for j in state.journals if j.class_id != class_id],
            "questionnaire_responses": [
                r for r in state.questionnaire_responses if r.student_id not in student_ids
            ],
        }
    )


# ============================================================================
# Students
# ============================================================================


def add_student(state: AppState, student: Student) -> AppState:
    _require_class(state, student.class_id)
    cleaned = student.model_copy(
        update={
            "name": validate_required(student.name, "Student name"),
            "nis": validate_required(student.nis, "NIS"),
        }
    )
    return state.model_copy(update={"students": [*state.students, cleaned]})


def update_student(state: AppState, student_id: str, **changes: Any) -> AppState:
    _require_student(state, student_id)
    if "name" in changes:
        changes["name"] = validate_required(changes["name"], "Student name")
    if "nis" in changes:
        changes["nis"] = validate_required(changes["nis"], "NIS")
    if "class_id" in changes:
        _require_class(state, changes["class_id"])

    return state.model_copy(
        update={
            "students": _replace_by_id(
                state.students, student_id, lambda s: _apply_changes(s, changes)
            )
        }
    )


def delete_student(state: AppState, student_id: str) -> AppState:
    """Delete a student with their grades, responses and attendance records."""
    _require_student(state, student_id)
    removed = {student_id}

    return state.model_copy(
        update={
            "students": _without_id(state.students, student_id),
            "grades": [g for g in state.grades if g.student_id != student_id],
            "questionnaire_responses": [
                r for r in state.questionnaire_responses if r.student_id != student_id
            ],
            "daily_attendance": [
                d.model_copy(update={"records": _strip_student_records(d.records, removed)})
                if any(r.student_id == student_id for r in d.records)
                else d
                for d in state.daily_attendance
            ],
            "journals": [
                j.model_copy(update={"attendance": _strip_student_records(j.attendance, removed)})
                if any(r.student_id == student_id for r in j.attendance)
                else j
                for j in state.journals
            ],
        }
    )


def parse_roster_csv(class_id: str, csv_text: str) -> list[Student]:
    """Parse ``NIS,Nama,L/P`` lines into students. Lines without NIS or name are skipped."""
    students: list[Student] = []

    for row in csv.reader(io.StringIO(csv_text)):
        if len(row) < 2:
            continue
        nis, name = row[0].strip(), row[1].strip()
        if not nis or not name:
            continue
        gender_raw = row[2].strip().upper() if len(row) > 2 else ""
        students.append(
            Student(
                nis=nis,
                name=name,
                gender=Gender.P if gender_raw == "P" else Gender.L,
                class_id=class_id,
            )
        )

    return students


def import_students_csv(state: AppState, class_id: str, csv_text: str) -> AppState:
    _require_class(state, class_id)
    students = parse_roster_csv(class_id, csv_text)
    if not students:
        raise ValidationError("No valid roster lines found (expected NIS,Nama,L/P)")
    return state.model_copy(update={"students": [*state.students, *students]})


# ============================================================================
# Assessments & grades
# ============================================================================


def _validate_assessment_fields(changes: dict[str, Any]) -> None:
    if "title" in changes:
        changes["title"] = validate_required(changes["title"], "Assessment title")
    if "date" in changes:
        changes["date"] = validate_iso_date(changes["date"], "Assessment date")
    if "max_score" in changes and (changes["max_score"] is None or changes["max_score"] <= 0):
        raise ValidationError("Maximum score must be positive")


def add_assessment(state: AppState, assessment: Assessment) -> AppState:
    _require_class(state, assessment.class_id)
    fields = {"title": assessment.title, "date": assessment.date, "max_score": assessment.max_score}
    _validate_assessment_fields(fields)
    return state.model_copy(
        update={"assessments": [*state.assessments, assessment.model_copy(update=fields)]}
    )


def update_assessment(state: AppState, assessment_id: str, **changes: Any) -> AppState:
    _require_assessment(state, assessment_id)
    _validate_assessment_fields(changes)

    return state.model_copy(
        update={
            "assessments": _replace_by_id(
                state.assessments,
                assessment_id,
                lambda a: _apply_changes(a, changes, immutable=("class_id",)),
            )
        }
    )


def delete_assessment(state: AppState, assessment_id: str) -> AppState:
    _require_assessment(state, assessment_id)
    return state.model_copy(
        update={
            "assessments": _without_id(state.assessments, assessment_id),
            "grades": [g for g in state.grades if g.assessment_id != assessment_id],
        }
    )


def save_grades(state: AppState, assessment_id: str, scores: Mapping[str, float]) -> AppState:
    """Upsert grades for one assessment, clamping each score into [0, max_score]."""
    assessment = _require_assessment(state, assessment_id)
    class_student_ids = {s.id for s in state.students_in_class(assessment.class_id)}

    for student_id in scores:
        if student_id not in class_student_ids:
            raise RecordNotFoundError("Student", student_id)

    grades = list(state.grades)
    for student_id, score in scores.items():
        clamped = clamp_score(float(score), assessment.max_score)
        existing = state.find_grade(assessment_id, student_id)
        if existing is not None:
            grade = existing.model_copy(update={"score": clamped})
        else:
            grade = Grade(assessment_id=assessment_id, student_id=student_id, score=clamped)
        grades = _upsert(grades, grade, key=lambda g: g.key)

    return state.model_copy(update={"grades": grades})


# ============================================================================
# Daily attendance
# ============================================================================


def _require_class_members(state: AppState, class_id: str, records: Iterable[AttendanceRecord]):
    member_ids = {s.id for s in state.students_in_class(class_id)}
    for record in records:
        if record.student_id not in member_ids:
            raise RecordNotFoundError("Student", record.student_id)


def save_daily_attendance(
    state: AppState, class_id: str, date: str, records: list[AttendanceRecord]
) -> AppState:
    """Save attendance for (class, date), replacing an earlier entry for the same key."""
    _require_class(state, class_id)
    day = validate_iso_date(date, "Attendance date")
    _require_class_members(state, class_id, records)

    entry = DailyAttendance(
        id=DailyAttendance.make_id(class_id, day),
        date=day,
        class_id=class_id,
        records=list(records),
    )
    return state.model_copy(
        update={
            "daily_attendance": _upsert(
                state.daily_attendance, entry, key=lambda d: (d.class_id, d.date)
            )
        }
    )


def delete_daily_attendance(state: AppState, class_id: str, date: str) -> AppState:
    remaining = [
        d for d in state.daily_attendance if not (d.class_id == class_id and d.date == date)
    ]
    if len(remaining) == len(state.daily_attendance):
        raise RecordNotFoundError("Attendance", DailyAttendance.make_id(class_id, date))
    return state.model_copy(update={"daily_attendance": remaining})


# ============================================================================
# Teaching journals
# ============================================================================


def save_journal(state: AppState, journal: TeachingJournal) -> AppState:
    """Create (newest first) or replace a journal.

    The attendance snapshot is completed so that every current student of the
    class has a record; students without one are marked present.
    """
    if not journal.class_id:
        raise ValidationError("Class cannot be empty")
    _require_class(state, journal.class_id)

    given = {record.student_id: record for record in journal.attendance}
    attendance = [
        given.get(student.id) or AttendanceRecord(student_id=student.id, status="H")
        for student in state.students_in_class(journal.class_id)
    ]
    cleaned = journal.model_copy(
        update={
            "subject": validate_required(journal.subject, "Subject"),
            "topic": validate_required(journal.topic, "Topic"),
            "date": validate_iso_date(journal.date, "Journal date"),
            "attendance": attendance,
        }
    )

    if any(j.id == journal.id for j in state.journals):
        journals = _replace_by_id(state.journals, journal.id, lambda _: cleaned)
    else:
        journals = [cleaned, *state.journals]

    return state.model_copy(update={"journals": journals})


def delete_journal(state: AppState, journal_id: str) -> AppState:
    _require_id(state.journals, journal_id, "Journal")
    return state.model_copy(update={"journals": _without_id(state.journals, journal_id)})


# ============================================================================
# Questionnaires
# ============================================================================


def save_questionnaire(state: AppState, questionnaire: Questionnaire) -> AppState:
    validate_required(questionnaire.title, "Questionnaire title")
    if not questionnaire.questions:
        raise ValidationError("A questionnaire needs at least one question")
    for question in questionnaire.questions:
        validate_required(question.text, "Question text")

    if state.find_questionnaire(questionnaire.id) is not None:
        questionnaires = _replace_by_id(
            state.questionnaires, questionnaire.id, lambda _: questionnaire
        )
    else:
        questionnaires = [*state.questionnaires, questionnaire]

    return state.model_copy(update={"questionnaires": questionnaires})


def delete_questionnaire(state: AppState, questionnaire_id: str) -> AppState:
    _require_id(state.questionnaires, questionnaire_id, "Questionnaire")
    return state.model_copy(
        update={
            "questionnaires": _without_id(state.questionnaires, questionnaire_id),
            "questionnaire_responses": [
                r
                for r in state.questionnaire_responses
                if r.questionnaire_id != questionnaire_id
            ],
        }
    )


def save_response(
    state: AppState,
    questionnaire_id: str,
    student_id: str,
    answers: Mapping[str, int],
    answered_at: str | None = None,
) -> AppState:
    """Upsert a student's answers; a re-submission discards the cached AI analysis."""
    questionnaire = state.find_questionnaire(questionnaire_id)
    if questionnaire is None:
        raise RecordNotFoundError("Questionnaire", questionnaire_id)
    _require_student(state, student_id)

    response = QuestionnaireResponse(
        id=QuestionnaireResponse.make_id(questionnaire_id, student_id),
        questionnaire_id=questionnaire_id,
        student_id=student_id,
        date=answered_at or _now(),
        answers=validate_answers(questionnaire, answers),
    )
    return state.model_copy(
        update={
            "questionnaire_responses": _upsert(
                state.questionnaire_responses,
                response,
                key=lambda r: (r.questionnaire_id, r.student_id),
            )
        }
    )


def attach_talent_analysis(state: AppState, response_id: str, analysis: str) -> AppState:
    """Cache an AI analysis on a response.

    Applied to whatever snapshot is current when the AI call returns; if the
    response was deleted meanwhile the snapshot is returned unchanged.
    """
    if not any(r.id == response_id for r in state.questionnaire_responses):
        logger.warning(f"Response {response_id} no longer exists, dropping talent analysis")
        return state

    return state.model_copy(
        update={
            "questionnaire_responses": _replace_by_id(
                state.questionnaire_responses,
                response_id,
                lambda r: r.model_copy(update={"ai_analysis": analysis}),
            )
        }
    )


# ============================================================================
# Exam packages
# ============================================================================


def save_exam_package(
    state: AppState, package: ExamPackage, saved_at: str | None = None
) -> AppState:
    """Create or replace an exam package. ``created_date`` is stamped on every save."""
    cleaned = package.model_copy(
        update={
            "title": validate_required(package.title, "Exam title"),
            "subject": validate_required(package.subject, "Subject"),
            "questions": [validate_exam_question(q) for q in package.questions],
            "created_date": saved_at or _now(),
        }
    )

    if state.find_exam_package(package.id) is not None:
        packages = _replace_by_id(state.exam_packages, package.id, lambda _: cleaned)
    else:
        packages = [*state.exam_packages, cleaned]

    return state.model_copy(update={"exam_packages": packages})


def delete_exam_package(state: AppState, package_id: str) -> AppState:
    _require_id(state.exam_packages, package_id, "Exam package")
    return state.model_copy(
        update={"exam_packages": _without_id(state.exam_packages, package_id)}
    )


def merge_exam_questions(
    state: AppState, package_id: str, questions: list[ExamQuestion]
) -> AppState:
    """Upsert questions into a package by question id.

    Used for AI-generated questions, which arrive after the request that
    triggered them; a package deleted in the meantime leaves the snapshot
    unchanged.
    """
    validated = [validate_exam_question(q) for q in questions]

    package = state.find_exam_package(package_id)
    if package is None:
        logger.warning(f"Exam package {package_id} no longer exists, dropping generated questions")
        return state

    merged = list(package.questions)
    for question in validated:
        merged = _upsert(merged, question, key=lambda q: q.id)

    return state.model_copy(
        update={
            "exam_packages": _replace_by_id(
                state.exam_packages,
                package_id,
                lambda p: p.model_copy(update={"questions": merged}),
            )
        }
    )


# ============================================================================
# Forum
# ============================================================================


def add_forum_post(state: AppState, post: ForumPost) -> AppState:
    cleaned = post.model_copy(
        update={
            "content": validate_required(post.content, "Post content"),
            "author": validate_required(post.author, "Author"),
        }
    )
    return state.model_copy(update={"forum_posts": [cleaned, *state.forum_posts]})


def like_forum_post(state: AppState, post_id: str) -> AppState:
    _require_id(state.forum_posts, post_id, "Post")
    return state.model_copy(
        update={
            "forum_posts": _replace_by_id(
                state.forum_posts, post_id, lambda p: p.model_copy(update={"likes": p.likes + 1})
            )
        }
    )


def add_forum_comment(state: AppState, post_id: str, comment: ForumComment) -> AppState:
    _require_id(state.forum_posts, post_id, "Post")
    cleaned = comment.model_copy(
        update={
            "content": validate_required(comment.content, "Comment"),
            "author": validate_required(comment.author, "Author"),
        }
    )
    return state.model_copy(
        update={
            "forum_posts": _replace_by_id(
                state.forum_posts,
                post_id,
                lambda p: p.model_copy(update={"comments": [*p.comments, cleaned]}),
            )
        }
    )


def delete_forum_comment(state: AppState, post_id: str, comment_id: str) -> AppState:
    post = next((p for p in state.forum_posts if p.id == post_id), None)
    if post is None:
        raise RecordNotFoundError("Post", post_id)
    _require_id(post.comments, comment_id, "Comment")

    return state.model_copy(
        update={
            "forum_posts": _replace_by_id(
                state.forum_posts,
                post_id,
                lambda p: p.model_copy(update={"comments": _without_id(p.comments, comment_id)}),
            )
        }
    )


def delete_forum_post(state: AppState, post_id: str) -> AppState:
    _require_id(state.forum_posts, post_id, "Post")
    return state.model_copy(update={"forum_posts": _without_id(state.forum_posts, post_id)})


# ============================================================================
# Settings
# ============================================================================


def update_settings(state: AppState, **changes: Any) -> AppState:
    if "kkm" in changes:
        changes["kkm"] = validate_kkm(changes["kkm"])
    for field in ("school_name", "teacher_name"):
        if field in changes:
            changes[field] = (changes[field] or "").strip()

    return state.model_copy(update={"settings": _apply_changes(state.settings, changes)})

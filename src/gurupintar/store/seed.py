"""
Demo Seed Data

Builds the default snapshot used on first start and as the skeleton that older
saved documents are migrated onto. Generation is seeded, so every call returns
an equal snapshot.
"""

from __future__ import annotations

import random
from datetime import date

from gurupintar.core.schemas import (
    AppState,
    Assessment,
    AssessmentType,
    ClassGroup,
    ForumComment,
    ForumPost,
    Gender,
    Grade,
    Question,
    Questionnaire,
    SchoolSettings,
    Student,
)

DEMO_SEED = 20230715

STUDENTS_PER_CLASS = 25

FIRST_NAMES = [
    "Aisyah", "Fatimah", "Zahra", "Khadijah", "Maryam",
    "Hafsah", "Nadia", "Siti", "Nurul", "Wardah",
]  # fmt: skip

LAST_NAMES = [
    "Azzahra", "Humaira", "Salsabila", "Fitri", "Hidayah",
    "Rahma", "Khoirunnisa", "Amalia", "Putri", "Shalihah",
]  # fmt: skip

# (type, title, weight)
DEMO_ASSESSMENTS: list[tuple[AssessmentType, str, float]] = [
    (AssessmentType.PH, "PH 1 - Tajwid", 10),
    (AssessmentType.PH, "PH 2 - Fiqih Wanita", 10),
    (AssessmentType.TUGAS, "Hafalan Juz 30", 20),
    (AssessmentType.PTS, "PTS Ganjil (Kitab)", 25),
    (AssessmentType.PH, "PH 3 - Bahasa Arab", 10),
    (AssessmentType.PAS, "PAS Ganjil", 25),
]

DEFAULT_SETTINGS = SchoolSettings(
    kkm=75,
    school_name="DIGISS Boarding School",
    teacher_name="Ustadzah Aminah, S.Pd.",
)


def default_questionnaires() -> list[Questionnaire]:
    return [
        Questionnaire(
            id="q1",
            title="Tes Gaya Belajar (V-A-K)",
            description=(
                "Mengetahui kecenderungan gaya belajar Visual, Auditory, "
                "atau Kinestetik santriwati."
            ),
            questions=[
                Question(
                    id="q1_1",
                    text="Saya lebih suka melihat gambar/diagram daripada mendengarkan penjelasan.",
                    category="Visual",
                ),
                Question(
                    id="q1_2",
                    text="Saya mudah mengingat apa yang saya dengar di kelas.",
                    category="Auditory",
                ),
                Question(
                    id="q1_3",
                    text="Saya suka belajar sambil bergerak atau memegang objek.",
                    category="Kinestetik",
                ),
            ],
        )
    ]


def default_forum_posts() -> list[ForumPost]:
    return [
        ForumPost(
            id="1",
            author="Ustadzah Fatimah",
            role="TEACHER",
            content=(
                "Assalamu'alaikum Santriwati Shalihah. Mengingatkan untuk setoran hafalan "
                "Juz 30 ba'da Ashar di Masjid Khadijah. Tolong perhatikan makhrajul hurufnya ya."
            ),
            date="2023-10-24T08:30:00",
            likes=42,
            comments=[
                ForumComment(
                    id="c1",
                    author="Aisyah Humaira (Santri)",
                    role="STUDENT",
                    content="Wa'alaikumussalam Ustadzah, insyaAllah siap.",
                    date="2023-10-24T09:00:00",
                ),
                ForumComment(
                    id="c2",
                    author="Fatimah Az-Zahra (Santri)",
                    role="STUDENT",
                    content="Afwan Ustadzah, saya izin terlambat sebentar karena piket.",
                    date="2023-10-24T09:15:00",
                ),
            ],
        ),
        ForumPost(
            id="2",
            author="Nadia (Ketua OSIS)",
            role="STUDENT",
            content=(
                "Teman-teman, untuk kajian Kitab Ta'lim Muta'allim besok, jangan lupa membawa "
                'buku catatan khusus Adab ya. Kita akan bahas bab "Menghormati Guru".'
            ),
            date="2023-10-23T14:00:00",
            likes=28,
        ),
    ]


def empty_state() -> AppState:
    """Snapshot with default settings and no records."""
    return AppState(settings=DEFAULT_SETTINGS)


def default_state(seed: int = DEMO_SEED) -> AppState:
    """Demo snapshot: two classes of 25 students with graded assessments."""
    rng = random.Random(seed)

    classes = [
        ClassGroup(id="c1", name="X Tahfidz 1", grade_level=10, year="2023/2024"),
        ClassGroup(id="c2", name="X Sains 2", grade_level=10, year="2023/2024"),
    ]
    students: list[Student] = []
    assessments: list[Assessment] = []
    grades: list[Grade] = []

    for class_group in classes:
        class_students = [
            Student(
                id=f"{class_group.id}_s{i}",
                nis=f"23{class_group.grade_level}{rng.randint(100, 999)}",
                name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
                gender=Gender.P,
                class_id=class_group.id,
            )
            for i in range(1, STUDENTS_PER_CLASS + 1)
        ]
        students.extend(class_students)

        for idx, (assessment_type, title, weight) in enumerate(DEMO_ASSESSMENTS):
            assessment = Assessment(
                id=f"{class_group.id}_a{idx}",
                title=title,
                type=assessment_type,
                class_id=class_group.id,
                # One assessment a month from August 2023
                date=date(2023 + (7 + idx) // 12, (7 + idx) % 12 + 1, 15).isoformat(),
                max_score=100,
                weight=weight,
            )
            assessments.append(assessment)

            for student_idx, student in enumerate(class_students):
                base_ability = 65 + (student_idx % 5) * 7
                score = min(max(base_ability + rng.randint(-5, 10), 50), 100)
                grades.append(
                    Grade(assessment_id=assessment.id, student_id=student.id, score=score)
                )

    return AppState(
        classes=classes,
        students=students,
        assessments=assessments,
        grades=grades,
        questionnaires=default_questionnaires(),
        forum_posts=default_forum_posts(),
        settings=DEFAULT_SETTINGS,
    )

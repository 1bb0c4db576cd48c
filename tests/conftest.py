"""
Pytest Configuration and Fixtures

Shared test fixtures for unit and API tests.
"""

from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from gurupintar.ai import AcademicAIService
from gurupintar.core.database import build_engine, build_session_factory, init_db
from gurupintar.core.schemas import (
    AppState,
    Assessment,
    AssessmentType,
    AttendanceRecord,
    ClassGroup,
    DailyAttendance,
    ForumComment,
    ForumPost,
    Gender,
    Grade,
    Question,
    Questionnaire,
    QuestionnaireResponse,
    SchoolSettings,
    Student,
    TeachingJournal,
)
from gurupintar.store import AcademicStateStore, SnapshotRepository

STORAGE_KEY = "guruPintarData"


@pytest.fixture
def engine(tmp_path):
    """SQLite engine on a throwaway file with the storage table created."""
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def repository(session_factory) -> SnapshotRepository:
    return SnapshotRepository(session_factory, key=STORAGE_KEY, quota_bytes=5 * 1024 * 1024)


@pytest.fixture
def scenario_state() -> AppState:
    """Small hand-built snapshot.

    Class c1 has students s1-s3 and assessments a1 (PH) and a2 (PTS); class c2
    has student s4 and assessment a3. KKM is 75.
    """
    return AppState(
        classes=[
            ClassGroup(id="c1", name="X IPA 1", grade_level=10, year="2024/2025"),
            ClassGroup(id="c2", name="XI IPS 2", grade_level=11, year="2024/2025"),
        ],
        students=[
            Student(id="s1", nis="1001", name="Aisyah Putri", gender=Gender.P, class_id="c1"),
            Student(id="s2", nis="1002", name="Budi Santoso", gender=Gender.L, class_id="c1"),
            Student(id="s3", nis="1003", name="Citra Lestari", gender=Gender.P, class_id="c1"),
            Student(id="s4", nis="2001", name="Dewi Anggraini", gender=Gender.P, class_id="c2"),
        ],
        assessments=[
            Assessment(
                id="a2", title="PTS Ganjil", type=AssessmentType.PTS, class_id="c1",
                date="2024-10-01",
            ),
            Assessment(
                id="a1", title="PH 1 Aljabar", type=AssessmentType.PH, class_id="c1",
                date="2024-08-15",
            ),
            Assessment(
                id="a3", title="PH 1 Ekonomi", type=AssessmentType.PH, class_id="c2",
                date="2024-08-20",
            ),
        ],
        grades=[
            Grade(assessment_id="a1", student_id="s1", score=80),
            Grade(assessment_id="a1", student_id="s2", score=90),
            Grade(assessment_id="a1", student_id="s3", score=50),
            Grade(assessment_id="a2", student_id="s1", score=60),
            Grade(assessment_id="a2", student_id="s2", score=95),
            Grade(assessment_id="a3", student_id="s4", score=70),
        ],
        journals=[
            TeachingJournal(
                id="j1",
                class_id="c1",
                date="2024-08-15",
                subject="Matematika",
                topic="Persamaan linear",
                attendance=[
                    AttendanceRecord(student_id="s1", status="H"),
                    AttendanceRecord(student_id="s2", status="S"),
                    AttendanceRecord(student_id="s3", status="H"),
                ],
            )
        ],
        daily_attendance=[
            DailyAttendance(
                id="c1_2024-08-15",
                date="2024-08-15",
                class_id="c1",
                records=[
                    AttendanceRecord(student_id="s1", status="H"),
                    AttendanceRecord(student_id="s2", status="A"),
                    AttendanceRecord(student_id="s3", status="T"),
                ],
            ),
            DailyAttendance(
                id="c2_2024-08-15",
                date="2024-08-15",
                class_id="c2",
                records=[AttendanceRecord(student_id="s4", status="H")],
            ),
        ],
        questionnaires=[
            Questionnaire(
                id="q1",
                title="Tes Gaya Belajar",
                questions=[
                    Question(id="q1_1", text="Suka gambar", category="Visual"),
                    Question(id="q1_2", text="Suka mendengar", category="Auditory"),
                    Question(id="q1_3", text="Suka diagram", category="Visual"),
                ],
            )
        ],
        questionnaire_responses=[
            QuestionnaireResponse(
                id="q1_s1",
                questionnaire_id="q1",
                student_id="s1",
                date="2024-09-01T08:00:00+00:00",
                answers={"q1_1": 4, "q1_2": 2, "q1_3": 3},
            ),
            QuestionnaireResponse(
                id="q1_s4",
                questionnaire_id="q1",
                student_id="s4",
                date="2024-09-01T08:00:00+00:00",
                answers={"q1_1": 1, "q1_2": 4, "q1_3": 1},
            ),
        ],
        forum_posts=[
            ForumPost(
                id="p1",
                author="Pak Budi (Guru)",
                role="TEACHER",
                content="Jangan lupa tugas minggu ini.",
                date="2024-09-02T07:00:00+00:00",
                likes=3,
                comments=[
                    ForumComment(
                        id="k1",
                        author="Aisyah Putri",
                        role="STUDENT",
                        content="Siap, Pak.",
                        date="2024-09-02T08:00:00+00:00",
                    )
                ],
            )
        ],
        settings=SchoolSettings(kkm=75, school_name="SMA Harapan", teacher_name="Bu Siti"),
    )


@pytest.fixture
def store(repository, scenario_state) -> AcademicStateStore:
    """Store holding the scenario snapshot (already persisted)."""
    store = AcademicStateStore(repository, seed_demo_data=False)
    store.replace(scenario_state)
    return store


@pytest.fixture
def fake_ai() -> MagicMock:
    """AI service double; configure return values per test."""
    return MagicMock(spec=AcademicAIService)


@pytest.fixture
async def client(store, fake_ai) -> AsyncClient:
    """Create test client with store and AI dependency overrides."""
    from gurupintar.api.v1.deps import get_ai, get_store
    from gurupintar.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_ai] = lambda: fake_ai
    app.state.store = store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    del app.state.store

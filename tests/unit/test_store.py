"""
Unit Tests for the Academic State Store and Demo Seed
"""

import json
from unittest.mock import patch

import pytest

from gurupintar.config import Settings
from gurupintar.core.models import StorageEntry
from gurupintar.core.schemas import SNAPSHOT_VERSION, AppState, ClassGroup
from gurupintar.core.validation import ValidationError
from gurupintar.store import (
    AcademicStateStore,
    StorageQuotaError,
    default_state,
    empty_state,
    mutations,
)
from gurupintar.store.seed import DEMO_ASSESSMENTS, STUDENTS_PER_CLASS


def _write_raw(session_factory, key: str, document) -> None:
    payload = json.dumps(document)
    with session_factory() as session:
        session.add(StorageEntry(key=key, value=payload, size_bytes=len(payload)))
        session.commit()


class TestLoad:
    """Tests for start-up loading."""

    def test_seeds_when_nothing_stored(self, repository):
        store = AcademicStateStore(repository)

        state = store.load()

        assert state == default_state()
        assert repository.load() is None

    def test_empty_skeleton_without_demo_data(self, repository):
        store = AcademicStateStore(repository, seed_demo_data=False)

        assert store.load() == empty_state()

    def test_migrates_stored_legacy_document(self, repository, session_factory):
        _write_raw(
            session_factory,
            repository.key,
            {"classes": [], "students": [], "settings": {"kkm": 80, "schoolName": "SMP Lama"}},
        )
        store = AcademicStateStore(repository)

        state = store.load()

        assert state.version == SNAPSHOT_VERSION
        assert state.classes == []
        assert state.settings.kkm == 80
        assert state.settings.school_name == "SMP Lama"
        assert len(state.forum_posts) == 2

    def test_falls_back_on_unusable_document(self, repository, session_factory):
        _write_raw(session_factory, repository.key, {"version": 99, "classes": []})
        store = AcademicStateStore(repository)

        assert store.load() == default_state()

    def test_falls_back_on_malformed_legacy_settings(self, repository, session_factory):
        _write_raw(
            session_factory, repository.key, {"classes": [], "students": [], "settings": "oops"}
        )
        store = AcademicStateStore(repository, seed_demo_data=False)

        assert store.load() == empty_state()

    def test_falls_back_on_invalid_records(self, repository, session_factory):
        _write_raw(
            session_factory,
            repository.key,
            {"version": SNAPSHOT_VERSION, "students": [{"name": "Tanpa NIS"}]},
        )
        store = AcademicStateStore(repository, seed_demo_data=False)

        assert store.load() == empty_state()

    def test_reloads_what_was_saved(self, repository, scenario_state: AppState):
        AcademicStateStore(repository, seed_demo_data=False).replace(scenario_state)

        assert AcademicStateStore(repository).load() == scenario_state

    def test_from_settings(self, session_factory):
        settings = Settings(STORAGE_KEY="fromSettings", SEED_DEMO_DATA=False)

        store = AcademicStateStore.from_settings(settings, session_factory)

        assert store.repository.key == "fromSettings"
        assert store.seed_demo_data is False


class TestDispatch:
    """Tests for applying and persisting mutations."""

    def test_dispatch_persists(self, store: AcademicStateStore):
        state = store.dispatch(mutations.add_class, ClassGroup(id="c3", name="XII IPA"))

        assert store.state is state
        assert store.last_warning is None
        assert [c["id"] for c in store.repository.load()["classes"]] == ["c1", "c2", "c3"]

    def test_validation_error_keeps_state(self, store: AcademicStateStore):
        before = store.state

        with pytest.raises(ValidationError):
            store.dispatch(mutations.add_class, ClassGroup(name=""))

        assert store.state is before
        assert len(store.repository.load()["classes"]) == 2

    def test_storage_failure_keeps_new_state_in_memory(self, store: AcademicStateStore):
        with patch.object(
            store.repository, "save", side_effect=StorageQuotaError(6_000_000, 5_242_880)
        ):
            state = store.dispatch(mutations.like_forum_post, "p1")

        assert store.state is state
        assert state.forum_posts[0].likes == 4
        assert "storage quota" in store.last_warning
        # Stored document still holds the previous snapshot
        assert store.repository.load()["forumPosts"][0]["likes"] == 3

    def test_warning_clears_on_next_successful_save(self, store: AcademicStateStore):
        with patch.object(store.repository, "save", side_effect=StorageQuotaError(2, 1)):
            store.dispatch(mutations.like_forum_post, "p1")
        assert store.last_warning is not None

        store.dispatch(mutations.like_forum_post, "p1")

        assert store.last_warning is None
        assert store.repository.load()["forumPosts"][0]["likes"] == 5

    def test_replace(self, store: AcademicStateStore):
        store.replace(empty_state())

        assert store.state == empty_state()
        assert store.repository.load()["classes"] == []


class TestDemoSeed:
    """Tests for the generated demo snapshot."""

    def test_deterministic(self):
        assert default_state() == default_state()

    def test_shape(self):
        state = default_state()

        assert len(state.classes) == 2
        for class_group in state.classes:
            assert len(state.students_in_class(class_group.id)) == STUDENTS_PER_CLASS
            assert len(state.assessments_in_class(class_group.id)) == len(DEMO_ASSESSMENTS)
        assert len(state.grades) == 2 * STUDENTS_PER_CLASS * len(DEMO_ASSESSMENTS)

    def test_grades_in_range(self):
        assert all(50 <= g.score <= 100 for g in default_state().grades)

    def test_questionnaire_and_forum(self):
        state = default_state()

        assert [q.id for q in state.questionnaires] == ["q1"]
        assert {q.category for q in state.questionnaires[0].questions} == {
            "Visual",
            "Auditory",
            "Kinestetik",
        }
        assert len(state.forum_posts) == 2

    def test_empty_state_keeps_settings(self):
        state = empty_state()

        assert state.classes == []
        assert state.settings.kkm == 75

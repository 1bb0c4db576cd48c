"""
Tests for Questionnaire API Endpoints
"""

from unittest.mock import MagicMock

from httpx import AsyncClient

from gurupintar.store import AcademicStateStore
from gurupintar.store import mutations as m


class TestQuestionnaires:
    async def test_list(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/questionnaires")

        assert response.status_code == 200
        assert [q["id"] for q in response.json()] == ["q1"]

    async def test_create(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/questionnaires",
            json={
                "title": "Minat Bakat",
                "questions": [
                    {"text": "Saya suka menggambar", "category": "Seni"},
                    {"text": "Saya suka berhitung", "category": "Logika"},
                ],
            },
        )

        assert response.status_code == 201
        assert len(response.json()["data"]["questions"]) == 2

    async def test_create_without_questions(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/questionnaires", json={"title": "Kosong"})

        assert response.status_code == 422

    async def test_update(self, client: AsyncClient) -> None:
        response = await client.put(
            "/api/v1/questionnaires/q1",
            json={
                "title": "Gaya Belajar (Revisi)",
                "questions": [{"id": "q1_1", "text": "Suka gambar", "category": "Visual"}],
            },
        )

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Gaya Belajar (Revisi)"

    async def test_delete_removes_responses(
        self, client: AsyncClient, store: AcademicStateStore
    ) -> None:
        response = await client.delete("/api/v1/questionnaires/q1")

        assert response.status_code == 200
        assert store.state.questionnaire_responses == []


class TestResponses:
    async def test_submit(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/questionnaires/q1/responses",
            json={"studentId": "s2", "answers": {"q1_1": 2, "q1_2": 4, "q1_3": 1}},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] == "q1_s2"
        assert data["answers"] == {"q1_1": 2, "q1_2": 4, "q1_3": 1}

    async def test_submit_incomplete(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/questionnaires/q1/responses",
            json={"studentId": "s2", "answers": {"q1_1": 2}},
        )

        assert response.status_code == 422

    async def test_results(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/questionnaires/q1/results", params={"classId": "c1"})

        assert response.status_code == 200
        results = response.json()
        assert [r["studentId"] for r in results] == ["s1", "s2", "s3"]
        assert results[0]["categoryScores"] == {"Visual": 7, "Auditory": 2}
        assert results[1]["response"] is None


class TestTalentAnalysis:
    async def test_analysis_is_cached_on_response(
        self, client: AsyncClient, store: AcademicStateStore, fake_ai: MagicMock
    ) -> None:
        fake_ai.analyze_talent.return_value = "Dominan visual."

        response = await client.post("/api/v1/questionnaires/q1/responses/s1/analysis")

        assert response.status_code == 200
        assert response.json()["data"]["aiAnalysis"] == "Dominan visual."
        fake_ai.analyze_talent.assert_called_once_with(
            "Aisyah Putri", "Tes Gaya Belajar", {"Visual": 7, "Auditory": 2}
        )
        assert store.state.questionnaire_responses[0].ai_analysis == "Dominan visual."

    async def test_response_deleted_while_analysing(
        self, client: AsyncClient, store: AcademicStateStore, fake_ai: MagicMock
    ) -> None:
        """The analysis is dropped when the response disappears meanwhile."""

        def analyze_and_delete(*args):
            store.dispatch(m.delete_questionnaire, "q1")
            return "Terlambat."

        fake_ai.analyze_talent.side_effect = analyze_and_delete

        response = await client.post("/api/v1/questionnaires/q1/responses/s1/analysis")

        assert response.status_code == 200
        assert response.json()["data"] is None
        assert store.state.questionnaires == []

    async def test_no_response_yet(self, client: AsyncClient, fake_ai: MagicMock) -> None:
        response = await client.post("/api/v1/questionnaires/q1/responses/s2/analysis")

        assert response.status_code == 404
        fake_ai.analyze_talent.assert_not_called()

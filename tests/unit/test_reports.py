"""
Unit Tests for Report Cards and Questionnaire Scoring
"""

import pytest

from gurupintar.analytics import (
    build_report_card,
    category_scores,
    class_final_grades,
    final_grade,
    grade_breakdown,
    predicate,
    questionnaire_results,
    strengths_and_weaknesses,
)
from gurupintar.core.schemas import AppState, AssessmentType
from gurupintar.core.validation import RecordNotFoundError


class TestPredicate:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (95, "A (Sangat Baik)"),
            (90, "A (Sangat Baik)"),
            (80, "B (Baik)"),
            (79.9, "C (Cukup)"),
            (70, "C (Cukup)"),
            (1, "D (Kurang)"),
            (0, "-"),
            (None, "-"),
        ],
    )
    def test_thresholds(self, score, expected):
        assert predicate(score) == expected


class TestFinalGrade:
    def test_unweighted_mean_of_type_averages(self, scenario_state: AppState):
        """PH 80 and PTS 60 average to 70 regardless of assessment weights."""
        assert final_grade(scenario_state, "c1", "s1") == 70.0
        assert final_grade(scenario_state, "c1", "s2") == 92.5

    def test_ungraded_types_are_skipped(self, scenario_state: AppState):
        """s3 only has a PH grade; the missing PTS grade does not pull it down."""
        assert final_grade(scenario_state, "c1", "s3") == 50.0

    def test_no_grades(self, scenario_state: AppState):
        assert final_grade(scenario_state, "c2", "s1") == 0

    def test_class_final_grades(self, scenario_state: AppState):
        rows = class_final_grades(scenario_state, "c1")

        assert [(r.student_id, r.final_grade, r.predicate) for r in rows] == [
            ("s1", 70.0, "C (Cukup)"),
            ("s2", 92.5, "A (Sangat Baik)"),
            ("s3", 50.0, "D (Kurang)"),
        ]


class TestGradeBreakdown:
    def test_breakdown_per_type(self, scenario_state: AppState):
        rows = {row.type: row for row in grade_breakdown(scenario_state, "c1", "s1")}

        assert rows[AssessmentType.PH].average == 80
        assert rows[AssessmentType.PH].predicate == "B (Baik)"
        assert rows[AssessmentType.PTS].average == 60
        assert rows[AssessmentType.PAS].average is None
        assert rows[AssessmentType.PAS].predicate == "-"

    def test_ungraded_assessment_counts_as_zero(self, scenario_state: AppState):
        rows = {row.type: row for row in grade_breakdown(scenario_state, "c1", "s3")}

        assert rows[AssessmentType.PTS].average == 0
        assert rows[AssessmentType.PTS].predicate == "-"

    def test_strengths_and_weaknesses(self, scenario_state: AppState):
        s1 = strengths_and_weaknesses(grade_breakdown(scenario_state, "c1", "s1"), 75)
        s2 = strengths_and_weaknesses(grade_breakdown(scenario_state, "c1", "s2"), 75)

        assert s1.strengths == []
        assert s1.weaknesses == [AssessmentType.PTS]
        assert s2.strengths == [AssessmentType.PH, AssessmentType.PTS]
        assert s2.weaknesses == []


class TestReportCard:
    def test_build_report_card(self, scenario_state: AppState):
        card = build_report_card(scenario_state, "c1", "s1")

        assert card.school_name == "SMA Harapan"
        assert card.teacher_name == "Bu Siti"
        assert card.class_group.name == "X IPA 1"
        assert card.student.name == "Aisyah Putri"
        assert card.final_grade == 70.0
        assert card.final_predicate == "C (Cukup)"
        assert len(card.breakdown) == len(AssessmentType)

    def test_student_must_belong_to_class(self, scenario_state: AppState):
        with pytest.raises(RecordNotFoundError):
            build_report_card(scenario_state, "c1", "s4")

    def test_unknown_class(self, scenario_state: AppState):
        with pytest.raises(RecordNotFoundError):
            build_report_card(scenario_state, "nope", "s1")

    def test_serializes_camel_case(self, scenario_state: AppState):
        document = build_report_card(scenario_state, "c1", "s1").model_dump(by_alias=True)

        assert "finalGrade" in document
        assert "classId" in document["student"]


class TestQuestionnaireScoring:
    def test_category_sums(self, scenario_state: AppState):
        questionnaire = scenario_state.find_questionnaire("q1")
        response = scenario_state.questionnaire_responses[0]

        assert category_scores(questionnaire, response) == {"Visual": 7, "Auditory": 2}

    def test_unanswered_counts_zero(self, scenario_state: AppState):
        questionnaire = scenario_state.find_questionnaire("q1")
        response = scenario_state.questionnaire_responses[0].model_copy(
            update={"answers": {"q1_1": 4}}
        )

        assert category_scores(questionnaire, response) == {"Visual": 4, "Auditory": 0}

    def test_results_cover_whole_class(self, scenario_state: AppState):
        results = questionnaire_results(scenario_state, "q1", "c1")

        assert [r.student_id for r in results] == ["s1", "s2", "s3"]
        assert results[0].category_scores == {"Visual": 7, "Auditory": 2}
        assert results[1].response is None
        assert results[1].category_scores == {}

    def test_unknown_questionnaire(self, scenario_state: AppState):
        with pytest.raises(RecordNotFoundError):
            questionnaire_results(scenario_state, "missing", "c1")

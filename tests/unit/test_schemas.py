"""
StudyFlow - Schema Tests

Tests for Pydantic models, aliases, validation and serialization.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from studyflow.core.config import GenerationSettings, settings
from studyflow.models.enums import BloomLevel, ExamLevel, QuestionType
from studyflow.models.schemas import (
    AdvancedGenerationMetadata,
    CandidateQuestion,
    ConceptInfo,
    ContentAnalysis,
    GenerationParams,
    GenerationResult,
    QuestionGenerationRequest,
)


pytestmark = pytest.mark.unit


class TestContentAnalysisSchemas:

    def test_main_concepts(self, mitosis_analysis):
        assert [c.term for c in mitosis_analysis.main_concepts] == ["Mitosis", "Cytokinesis", "Chromosome"]

    def test_analysis_is_frozen(self, mitosis_analysis):
        with pytest.raises(ValidationError):
            mitosis_analysis.educational_value = 9

    def test_concept_importance_bounds(self):
        with pytest.raises(ValidationError):
            ConceptInfo(term="Mitosis", importance=11)

    def test_empty_analysis_defaults(self):
        analysis = ContentAnalysis()

        assert analysis.key_concepts == []
        assert analysis.main_concepts == []
        assert analysis.readability_score == 5.0


class TestCandidateQuestion:

    def test_concepts_tested_deduplicated(self):
        question = CandidateQuestion(
            id="q1",
            question_text="What separates chromosomes?",
            correct_answer="Mitosis",
            type=QuestionType.SHORT_ANSWER,
            concepts_tested=["Mitosis", "Spindle", "Mitosis"],
        )

        assert question.concepts_tested == ["Mitosis", "Spindle"]

    def test_defaults(self):
        question = CandidateQuestion(
            id="q1",
            question_text="What separates chromosomes?",
            correct_answer="Mitosis",
            type="short_answer",
        )

        assert question.topic == "General"
        assert question.difficulty == "medium"
        assert question.bloom_level == BloomLevel.UNDERSTAND
        assert question.exam_level == ExamLevel.STANDARDIZED
        assert question.time_to_answer == 90
        assert question.covered_concepts == ["General"]

    def test_camel_case_round_trip(self):
        question = CandidateQuestion.model_validate({
            "id": "q1",
            "questionText": "What separates chromosomes?",
            "correctAnswer": "Mitosis",
            "type": "fill_in_blank",
            "conceptsTested": ["Mitosis"],
        })
        data = question.model_dump(by_alias=True)

        assert data["questionText"] == "What separates chromosomes?"
        assert data["correctAnswer"] == "Mitosis"
        assert data["conceptsTested"] == ["Mitosis"]

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            CandidateQuestion(id="q1", question_text="Question?", correct_answer="A", type="riddle")


class TestGenerationSchemas:

    def test_params_defaults(self):
        params = GenerationParams()

        assert params.max_questions == 5
        assert QuestionType.MULTIPLE_CHOICE in params.question_types
        assert params.exam_level is None
        assert params.previous_answered == []

    @pytest.mark.parametrize("max_questions", [0, 51])
    def test_params_bounds(self, max_questions):
        with pytest.raises(ValidationError):
            GenerationParams(max_questions=max_questions)

    def test_params_follow_generation_settings(self, monkeypatch):
        with patch.dict(os.environ, {
            "GENERATION_DEFAULT_MAX_QUESTIONS": "3",
            "GENERATION_MAX_QUESTIONS_LIMIT": "4",
            "GENERATION_DEFAULT_QUESTION_TYPES": '["true_false", "short_answer"]',
        }):
            monkeypatch.setattr(settings, "generation", GenerationSettings())

        params = GenerationParams()

        assert params.max_questions == 3
        assert params.question_types == [QuestionType.TRUE_FALSE, QuestionType.SHORT_ANSWER]
        assert GenerationParams(max_questions=4).max_questions == 4
        with pytest.raises(ValidationError):
            GenerationParams(max_questions=40)

    def test_request_accepts_camel_case(self):
        request = QuestionGenerationRequest.model_validate({
            "content": "Mitosis divides cells.",
            "params": {"maxQuestions": 3, "examLevel": "graduate"},
        })

        assert request.params.max_questions == 3
        assert request.params.exam_level == ExamLevel.GRADUATE

    def test_result_serializes_advanced_metadata(self):
        result = GenerationResult(metadata=AdvancedGenerationMetadata(bloom_distribution={"apply": 2}))
        data = result.model_dump(by_alias=True)

        assert data["metadata"]["bloomDistribution"] == {"apply": 2}
        assert data["metadata"]["qualityMetrics"]["hasHints"] == 0

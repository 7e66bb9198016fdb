"""
StudyFlow - Template Fallback Tests
"""

import pytest

from studyflow.models.enums import BloomLevel, ExamLevel, QuestionType
from studyflow.models.schemas import ConceptInfo, ContentAnalysis, GenerationParams
from studyflow.services.generation.fallback import (
    ComprehensiveFallback,
    basic_concept_questions,
    content_excerpt,
    template_analytical_questions,
    template_application_questions,
)


pytestmark = pytest.mark.unit


class TestTemplates:

    def test_content_excerpt(self):
        assert content_excerpt("abcdef", 3) == "abc..."

    def test_basic_concept_questions(self, mitosis_analysis, mitosis_content):
        questions = basic_concept_questions(mitosis_content, mitosis_analysis.key_concepts, 2)

        assert [q.topic for q in questions] == ["Mitosis", "Cytokinesis"]
        assert questions[0].related_concepts == ["Cytokinesis", "Chromosome", "spindle"]
        assert questions[0].source_chunk == mitosis_analysis.key_concepts[0].context[0]

    def test_application_questions(self, mitosis_analysis, mitosis_content):
        questions = template_application_questions(mitosis_content, mitosis_analysis.key_concepts)

        assert len(questions) == 2
        assert all(q.bloom_level == BloomLevel.APPLY for q in questions)
        assert all(q.exam_level == ExamLevel.PROFESSIONAL for q in questions)

    def test_analytical_comparison(self, mitosis_analysis, mitosis_content):
        questions = template_analytical_questions(
            mitosis_content, mitosis_analysis.key_concepts, ExamLevel.CLASSROOM
        )

        assert len(questions) == 1
        assert questions[0].concepts_tested == ["Mitosis", "Cytokinesis"]
        assert questions[0].topic == "Mitosis vs Cytokinesis"
        assert questions[0].exam_level == ExamLevel.CLASSROOM

    def test_analytical_single_concept(self, mitosis_content):
        questions = template_analytical_questions(mitosis_content, [ConceptInfo(term="Mitosis")])

        assert questions[0].topic == "Content Analysis"
        assert questions[0].exam_level == ExamLevel.GRADUATE


class TestComprehensiveFallback:

    def test_rotates_question_types(self, mitosis_analysis, mitosis_content):
        result = ComprehensiveFallback().generate(
            mitosis_content, mitosis_analysis, GenerationParams(max_questions=5)
        )

        assert [q.type for q in result.questions] == [
            QuestionType.MULTIPLE_CHOICE,
            QuestionType.TRUE_FALSE,
            QuestionType.FILL_IN_BLANK,
            QuestionType.SHORT_ANSWER,
        ]
        assert result.questions[0].correct_answer in result.questions[0].options
        assert result.questions[1].options is None
        assert result.questions[2].correct_answer == "Chromosome"
        assert result.metadata.total_generated == result.metadata.quality_filtered == 4

    def test_respects_max_questions(self, mitosis_analysis, mitosis_content):
        result = ComprehensiveFallback().generate(
            mitosis_content, mitosis_analysis, GenerationParams(max_questions=2)
        )

        assert len(result.questions) == 2

    def test_concepts_from_capitalized_words(self):
        content = "Photosynthesis happens in Chloroplasts. Photosynthesis needs light."

        result = ComprehensiveFallback().generate(content, ContentAnalysis(), GenerationParams(max_questions=5))

        assert [q.topic for q in result.questions] == ["Photosynthesis", "Chloroplasts"]

    def test_placeholder_concepts(self):
        content = "all lowercase text without any capitalised terms at all."

        result = ComprehensiveFallback().generate(content, ContentAnalysis(), GenerationParams(max_questions=5))

        assert [q.topic for q in result.questions] == ["concept 1", "concept 2", "concept 3"]

    def test_requested_exam_level_applied(self, mitosis_analysis, mitosis_content):
        result = ComprehensiveFallback().generate(
            mitosis_content, mitosis_analysis, GenerationParams(max_questions=4, exam_level=ExamLevel.GRADUATE)
        )

        assert {q.exam_level for q in result.questions} == {ExamLevel.GRADUATE}

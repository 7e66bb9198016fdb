"""
StudyFlow - Question Generator Integration Tests

End-to-end runs of the standard and exam-level pipelines with a stubbed
completion service.
"""

import json

import pytest

from studyflow.core.exceptions import UnsuitableContentError
from studyflow.models.enums import BloomLevel, ContentDifficulty, ExamLevel
from studyflow.models.schemas import (
    AdvancedGenerationMetadata,
    ContentAnalysis,
    GenerationMetadata,
    GenerationParams,
)
from studyflow.services.generation.question_generator import QuestionGenerator, exam_level_for_content


pytestmark = pytest.mark.integration


@pytest.fixture
def generator_factory(stub_analyzer):
    def build(llm_manager):
        return QuestionGenerator(llm_manager=llm_manager, analyzer=stub_analyzer)
    return build


class TestComprehensiveGeneration:

    @pytest.mark.asyncio
    async def test_malformed_model_response_falls_back_to_templates(
        self, generator_factory, llm_factory, mitosis_analysis, mitosis_content
    ):
        generator = generator_factory(llm_factory("I'm sorry, I can't produce JSON today."))

        result = await generator.generate_comprehensive_questions(
            mitosis_content, GenerationParams(max_questions=5), mitosis_analysis
        )

        assert type(result.metadata) is GenerationMetadata
        assert result.metadata.total_generated == 7
        assert len(result.questions) == 5
        assert result.metadata.quality_filtered == 5
        assert all(q.educational_value >= 5 for q in result.questions)
        assert result.metadata.average_quality == 9.0
        assert result.metadata.concepts_covered == ["Mitosis", "Cytokinesis", "Chromosome"]

    @pytest.mark.asyncio
    async def test_model_questions_join_the_pool(
        self, generator_factory, llm_factory, mitosis_analysis, mitosis_content
    ):
        items = [{
            "question": "Which process separates the chromosomes of a eukaryotic cell?",
            "type": "multiple_choice",
            "options": ["Mitosis", "Osmosis", "Diffusion", "Meiosis"],
            "correctAnswer": "Mitosis",
            "explanation": "Mitosis separates the chromosomes into two identical sets.",
            "topic": "Mitosis",
            "bloomLevel": "apply",
        }]
        generator = generator_factory(llm_factory(json.dumps(items)))

        result = await generator.generate_comprehensive_questions(
            mitosis_content, GenerationParams(max_questions=3), mitosis_analysis
        )

        assert result.metadata.total_generated == 8
        assert result.questions[0].id.startswith("ai_")
        assert result.questions[0].educational_value == 10
        assert len(result.questions) == 3

    @pytest.mark.asyncio
    async def test_unsuitable_content_raises(self, generator_factory, llm_factory, mitosis_analysis):
        generator = generator_factory(llm_factory())

        with pytest.raises(UnsuitableContentError) as exc_info:
            await generator.generate_comprehensive_questions(
                "Mitosis divides cells.", GenerationParams(), mitosis_analysis
            )

        assert str(exc_info.value.message) == (
            "Content not suitable for question generation: Content too short (minimum 100 characters)"
        )

    @pytest.mark.asyncio
    async def test_content_without_concepts_raises(self, generator_factory, llm_factory, mitosis_content):
        llm = llm_factory()
        generator = generator_factory(llm)
        analysis = ContentAnalysis(key_concepts=[], educational_value=1)

        with pytest.raises(UnsuitableContentError) as exc_info:
            await generator.generate_comprehensive_questions(mitosis_content, GenerationParams(), analysis)

        assert exc_info.value.message == (
            "Content not suitable for question generation: No identifiable educational concepts found"
        )
        llm.generate_response.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_analysis_computed_when_missing(self, generator_factory, llm_factory, stub_analyzer, mitosis_content):
        generator = generator_factory(llm_factory(""))

        result = await generator.generate_comprehensive_questions(mitosis_content, GenerationParams(max_questions=2))

        stub_analyzer.analyze.assert_called_once_with(mitosis_content)
        assert len(result.questions) == 2

    @pytest.mark.asyncio
    async def test_previously_answered_questions_skipped(
        self, generator_factory, llm_factory, mitosis_analysis, mitosis_content
    ):
        generator = generator_factory(llm_factory(""))
        answered = "True or False: Mitosis is essential for understanding the main topic discussed."

        result = await generator.generate_comprehensive_questions(
            mitosis_content, GenerationParams(max_questions=10, previous_answered=[answered]), mitosis_analysis
        )

        assert len(result.questions) == 6
        assert answered not in [q.question_text for q in result.questions]


class TestExamLevelGeneration:

    @pytest.mark.asyncio
    async def test_templates_without_api_key(
        self, generator_factory, unavailable_llm, mitosis_analysis, mitosis_content
    ):
        generator = generator_factory(unavailable_llm)

        result = await generator.generate_exam_level_questions(
            mitosis_content, mitosis_analysis, GenerationParams(max_questions=5)
        )

        assert isinstance(result.metadata, AdvancedGenerationMetadata)
        assert len(result.questions) == 5
        assert result.metadata.bloom_distribution == {"analyze": 1, "apply": 2, "understand": 2}
        assert result.questions[0].bloom_level == BloomLevel.ANALYZE
        assert result.metadata.total_generated == 5

    @pytest.mark.asyncio
    async def test_unsuitable_content_uses_fallback(self, generator_factory, llm_factory, mitosis_analysis):
        llm = llm_factory()
        generator = generator_factory(llm)

        result = await generator.generate_exam_level_questions(
            "Too short to study.", mitosis_analysis, GenerationParams(max_questions=5)
        )

        llm.generate_response.assert_not_awaited()
        assert len(result.questions) == 4
        assert result.metadata.total_generated == result.metadata.quality_filtered == 4
        assert result.questions[0].id.startswith("fallback_mc_")

    @pytest.mark.asyncio
    async def test_content_without_concepts_uses_capitalized_words(
        self, generator_factory, llm_factory, mitosis_content
    ):
        llm = llm_factory()
        generator = generator_factory(llm)
        analysis = ContentAnalysis(key_concepts=[], educational_value=1)

        result = await generator.generate_exam_level_questions(
            mitosis_content, analysis, GenerationParams(max_questions=5)
        )

        llm.generate_response.assert_not_awaited()
        assert [q.topic for q in result.questions] == ["Mitosis", "During", "Chromosome", "Cytokinesis", "Errors"]
        assert result.metadata.total_generated == result.metadata.quality_filtered == 5

    @pytest.mark.asyncio
    async def test_pipeline_error_uses_fallback(
        self, generator_factory, unavailable_llm, mitosis_analysis, mitosis_content, monkeypatch
    ):
        generator = generator_factory(unavailable_llm)

        def explode(*args, **kwargs):
            raise RuntimeError("selector broke")

        monkeypatch.setattr(generator.exam_pipeline.selector, "select", explode)

        result = await generator.generate_exam_level_questions(
            mitosis_content, mitosis_analysis, GenerationParams(max_questions=3)
        )

        assert len(result.questions) == 3
        assert all(q.id.startswith("fallback_") for q in result.questions)

    @pytest.mark.asyncio
    async def test_focus_areas_first(self, generator_factory, unavailable_llm, mitosis_analysis, mitosis_content):
        generator = generator_factory(unavailable_llm)

        result = await generator.generate_exam_level_questions(
            mitosis_content, mitosis_analysis, GenerationParams(max_questions=5, focus_areas=["cytokinesis"])
        )

        assert "Cytokinesis" in result.questions[0].topic

    @pytest.mark.asyncio
    async def test_requested_exam_level(self, generator_factory, unavailable_llm, mitosis_analysis, mitosis_content):
        generator = generator_factory(unavailable_llm)

        result = await generator.generate_exam_level_questions(
            mitosis_content, mitosis_analysis, GenerationParams(max_questions=5, exam_level=ExamLevel.CLASSROOM)
        )

        assert {q.exam_level for q in result.questions} == {ExamLevel.CLASSROOM, ExamLevel.STANDARDIZED}


class TestExamLevelForContent:

    @pytest.mark.parametrize("difficulty,level", [
        (ContentDifficulty.BASIC, ExamLevel.CLASSROOM),
        (ContentDifficulty.INTERMEDIATE, ExamLevel.STANDARDIZED),
        (ContentDifficulty.ADVANCED, ExamLevel.GRADUATE),
    ])
    def test_mapping(self, difficulty, level):
        assert exam_level_for_content(ContentAnalysis(difficulty_level=difficulty)) == level

"""
StudyFlow - Question Generation Service

Orchestrates question generation using specialized services:
content analysis, candidate strategies, quality filtering, diverse
selection and metadata reporting.

Standard and exam-level generation share one pipeline; they differ only
in the components plugged into it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from ...core.exceptions import UnsuitableContentError
from ...models.enums import ContentDifficulty, ExamLevel, GenerationMode
from ...models.schemas import (
    CandidateQuestion,
    ContentAnalysis,
    GenerationMetadata,
    GenerationParams,
    GenerationResult,
)
from ..analysis.content_analyzer import ContentAnalyzer, get_content_analyzer
from ..llm.llm_manager import LLMManager, get_llm_manager
from ..quality.metadata import MetadataSummarizer
from ..quality.validator import ContentSuitabilityChecker, ExamLevelValidator, QualityScorer
from .fallback import ComprehensiveFallback
from .question_prompt_builder import QuestionPromptBuilder
from .question_selection import (
    BloomDistributionSelector,
    DiversitySelector,
    filter_previous_answered,
    prioritize_focus_areas,
)
from .strategies import (
    AnalyticalStrategy,
    ApplicationStrategy,
    ConceptEnumerationStrategy,
    ConceptMasteryStrategy,
    GenerationStrategy,
    ModelCompletionStrategy,
    TemplateStrategy,
)

logger = logging.getLogger(__name__)

CONTENT_EXAM_LEVELS = {
    ContentDifficulty.ADVANCED: ExamLevel.GRADUATE,
    ContentDifficulty.INTERMEDIATE: ExamLevel.STANDARDIZED,
    ContentDifficulty.BASIC: ExamLevel.CLASSROOM,
}


class QuestionFilter(Protocol):
    def validate_and_rank(
        self,
        questions: List[CandidateQuestion],
        analysis: ContentAnalysis,
        content: str
    ) -> List[CandidateQuestion]:
        ...


class QuestionSelector(Protocol):
    def select(self, candidates: Sequence[CandidateQuestion], max_questions: int) -> List[CandidateQuestion]:
        ...


@dataclass
class GenerationPipeline:
    """Components plugged into one generation mode."""
    mode: GenerationMode
    strategies: List[GenerationStrategy]
    question_filter: QuestionFilter
    selector: QuestionSelector
    summarize: Callable[[List[CandidateQuestion], List[CandidateQuestion]], GenerationMetadata]
    suitability: ContentSuitabilityChecker


def exam_level_for_content(analysis: ContentAnalysis) -> ExamLevel:
    """Exam level implied by the analysed difficulty of the content."""
    return CONTENT_EXAM_LEVELS.get(analysis.difficulty_level, ExamLevel.STANDARDIZED)


class QuestionGenerator:
    """
    Orchestrator service for question generation.

    Delegates each step to a dedicated service:
    - ContentAnalyzer: concept extraction and suitability inputs
    - GenerationStrategy objects: candidate questions
    - QualityScorer / ExamLevelValidator: filtering and ranking
    - DiversitySelector / BloomDistributionSelector: bounded selection
    - MetadataSummarizer: reporting
    """

    def __init__(
        self,
        llm_manager: Optional[LLMManager] = None,
        analyzer: Optional[ContentAnalyzer] = None,
        prompt_builder: Optional[QuestionPromptBuilder] = None,
        summarizer: Optional[MetadataSummarizer] = None,
        standard_pipeline: Optional[GenerationPipeline] = None,
        exam_pipeline: Optional[GenerationPipeline] = None,
        fallback: Optional[ComprehensiveFallback] = None
    ):
        """Initialize the generator; missing components are built from settings."""
        self.llm_manager = llm_manager or get_llm_manager()
        self.analyzer = analyzer or get_content_analyzer()
        self.prompt_builder = prompt_builder or QuestionPromptBuilder()
        self.summarizer = summarizer or MetadataSummarizer()
        self.standard_pipeline = standard_pipeline or self._build_standard_pipeline()
        self.exam_pipeline = exam_pipeline or self._build_exam_pipeline()
        self.fallback = fallback or ComprehensiveFallback(self.summarizer)

    def _build_standard_pipeline(self) -> GenerationPipeline:
        return GenerationPipeline(
            mode=GenerationMode.STANDARD,
            strategies=[
                ModelCompletionStrategy(self.llm_manager, self.prompt_builder),
                TemplateStrategy(),
                ConceptEnumerationStrategy(),
            ],
            question_filter=QualityScorer(),
            selector=DiversitySelector(),
            summarize=self.summarizer.summarize,
            suitability=ContentSuitabilityChecker(GenerationMode.STANDARD),
        )

    def _build_exam_pipeline(self) -> GenerationPipeline:
        return GenerationPipeline(
            mode=GenerationMode.EXAM_LEVEL,
            strategies=[
                ConceptMasteryStrategy(self.llm_manager, self.prompt_builder),
                ApplicationStrategy(self.llm_manager, self.prompt_builder),
                AnalyticalStrategy(self.llm_manager, self.prompt_builder),
            ],
            question_filter=ExamLevelValidator(),
            selector=BloomDistributionSelector(),
            summarize=self.summarizer.summarize_advanced,
            suitability=ContentSuitabilityChecker(GenerationMode.EXAM_LEVEL),
        )

    def analyze(self, content: str) -> ContentAnalysis:
        return self.analyzer.analyze(content)

    async def _run_pipeline(
        self,
        pipeline: GenerationPipeline,
        content: str,
        analysis: ContentAnalysis,
        params: GenerationParams
    ) -> GenerationResult:
        candidates: List[CandidateQuestion] = []
        for strategy in pipeline.strategies:
            generated = await strategy.generate(content, analysis, params)
            logger.info(f"{strategy.name}: generated {len(generated)} questions")
            candidates.extend(generated)

        validated = pipeline.question_filter.validate_and_rank(candidates, analysis, content)
        validated = filter_previous_answered(validated, params.previous_answered)
        selected = pipeline.selector.select(validated, params.max_questions)
        metadata = pipeline.summarize(selected, candidates)

        logger.info(
            f"{pipeline.mode.value} generation complete: generated={len(candidates)}, "
            f"validated={len(validated)}, selected={len(selected)}, "
            f"average_quality={metadata.average_quality}"
        )
        return GenerationResult(questions=selected, metadata=metadata)

    async def generate_comprehensive_questions(
        self,
        content: str,
        params: GenerationParams,
        analysis: Optional[ContentAnalysis] = None
    ) -> GenerationResult:
        """
        Standard generation: model, template and concept strategies with strict scoring.

        Args:
            content: Study material chunk
            params: Generation parameters
            analysis: Precomputed analysis, computed from content when omitted

        Returns:
            Selected questions with basic metadata

        Raises:
            UnsuitableContentError: If the content fails the suitability checks
        """
        logger.info("Starting comprehensive question generation")
        if analysis is None:
            analysis = self.analyze(content)

        check = self.standard_pipeline.suitability.check(analysis, content)
        if not check.suitable:
            logger.warning(f"Content rejected: {check.reason}")
            raise UnsuitableContentError(check.reason)

        logger.info(
            f"Content analysis: {len(analysis.key_concepts)} concepts, "
            f"{len(analysis.main_concepts)} main, educational_value={analysis.educational_value}, "
            f"difficulty={analysis.difficulty_level.value}"
        )
        return await self._run_pipeline(self.standard_pipeline, content, analysis, params)

    async def generate_exam_level_questions(
        self,
        content: str,
        analysis: Optional[ContentAnalysis],
        params: GenerationParams
    ) -> GenerationResult:
        """
        Exam-level generation with Bloom-balanced selection.

        Never raises for unsuitable content or strategy failures: the
        comprehensive template fallback is returned instead.
        """
        logger.info("Generating exam-level questions")
        if analysis is None:
            analysis = self.analyze(content)

        check = self.exam_pipeline.suitability.check(analysis, content)
        if not check.suitable:
            logger.warning(f"Content validation failed, using fallback: {check.reason}")
            return self.fallback.generate(content, analysis, params)

        try:
            result = await self._run_pipeline(self.exam_pipeline, content, analysis, params)
        except Exception as e:
            logger.error(f"Exam-level generation failed, using fallback: {e}")
            return self.fallback.generate(content, analysis, params)

        if params.focus_areas:
            result.questions = prioritize_focus_areas(result.questions, params.focus_areas)
        return result


# Global question generator instance
_question_generator: QuestionGenerator | None = None


def get_question_generator() -> QuestionGenerator:
    """Get the global question generator instance."""
    global _question_generator
    if _question_generator is None:
        _question_generator = QuestionGenerator()
    return _question_generator


# Convenience functions
async def generate_comprehensive_questions(
    content: str,
    params: Optional[GenerationParams] = None,
    analysis: Optional[ContentAnalysis] = None
) -> GenerationResult:
    """Run standard generation with the global generator."""
    generator = get_question_generator()
    return await generator.generate_comprehensive_questions(content, params or GenerationParams(), analysis)


async def generate_exam_level_questions(
    content: str,
    params: Optional[GenerationParams] = None,
    analysis: Optional[ContentAnalysis] = None
) -> GenerationResult:
    """Run exam-level generation with the global generator."""
    generator = get_question_generator()
    return await generator.generate_exam_level_questions(content, analysis, params or GenerationParams())

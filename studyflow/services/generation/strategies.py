"""
Question Generation Strategies

Candidate generation strategies shared by standard and exam-level
generation. Every strategy implements the same async ``generate``
contract so the generator can combine them freely.

Strategies never raise for service or parsing failures: model strategies
degrade to an empty list (standard) or to their template fallback (exam).
"""

import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ...core.config import settings
from ...core.constants import (
    ANALYTICAL_SHARE,
    APPLICATION_SHARE,
    CONCEPT_MASTERY_SHARE,
    CONCEPT_QUESTION_BASE_VALUE,
    DEFAULT_BLOOM_LEVEL,
    DEFAULT_CONCEPT_TERM,
    DEFAULT_DIFFICULTY,
    DEFAULT_EXAM_LEVEL,
    DEFAULT_TIME_TO_ANSWER,
    DEFAULT_TOPIC,
    MAX_ANALYTICAL_QUESTIONS,
    MAX_APPLICATION_QUESTIONS,
    MAX_CONCEPT_MASTERY_QUESTIONS,
    MAX_ENUMERATED_CONCEPTS,
    MAX_MODEL_QUESTIONS,
    MAX_PROMPT_CONCEPTS,
    MAX_TEMPLATE_CONCEPTS,
    MODEL_QUESTION_BASE_VALUE,
    SHORT_SOURCE_CHUNK_LENGTH,
    TEMPLATE_QUESTION_BASE_VALUE,
    TEMPLATE_QUESTIONS_PER_KIND,
)
from ...models.enums import BloomLevel, CognitiveLoad, ExamLevel, QuestionType
from ...models.schemas import CandidateQuestion, ConceptInfo, ContentAnalysis, GenerationParams
from ..llm.llm_manager import LLMManager, get_llm_manager
from .fallback import (
    basic_concept_questions,
    content_excerpt,
    template_analytical_questions,
    template_application_questions,
)
from .question_parser import (
    enum_field,
    int_field,
    list_field,
    new_question_id,
    parse_question_array,
    question_type_field,
    text_field,
)
from .question_prompt_builder import QuestionPromptBuilder

logger = logging.getLogger(__name__)


def extract_relevant_context(content: str, question: Optional[str] = None, answer: Optional[str] = None) -> str:
    """
    Pick the sentence of the content that best supports a question.

    A sentence matches when it contains the answer, or any question word
    longer than three characters. Without an answer to look for, the first
    sentence is used when nothing matches.
    """
    sentences = re.findall(r"[^.!?]+[.!?]+", content)
    question_words = [w for w in (question or "").lower().split() if len(w) > 3]
    answer_lower = answer.lower() if answer is not None else None

    for sentence in sentences:
        lowered = sentence.lower()
        if (answer_lower is not None and answer_lower in lowered) or any(w in lowered for w in question_words):
            return content_excerpt(sentence.strip())

    if answer is None and sentences:
        return content_excerpt(sentences[0].strip())

    return content_excerpt(content)


def _concept_source(concept: ConceptInfo, content: str) -> str:
    return concept.context[0] if concept.context else content[:SHORT_SOURCE_CHUNK_LENGTH]


class GenerationStrategy(ABC):
    """Produces candidate questions for one chunk of content."""

    name: str = "strategy"

    @abstractmethod
    async def generate(
        self,
        content: str,
        analysis: ContentAnalysis,
        params: GenerationParams
    ) -> List[CandidateQuestion]:
        """Return candidate questions; never raises for recoverable failures."""


# ============================================================================
# Standard strategies
# ============================================================================

class ModelCompletionStrategy(GenerationStrategy):
    """
    Asks the completion service for questions about the main concepts.

    Any service error or malformed response yields no questions.
    """

    name = "model_completion"

    def __init__(
        self,
        llm_manager: Optional[LLMManager] = None,
        prompt_builder: Optional[QuestionPromptBuilder] = None,
        timeout: Optional[float] = None
    ):
        self.llm_manager = llm_manager or get_llm_manager()
        self.prompt_builder = prompt_builder or QuestionPromptBuilder()
        self.timeout = timeout or settings.llm.short_request_timeout

    async def generate(
        self,
        content: str,
        analysis: ContentAnalysis,
        params: GenerationParams
    ) -> List[CandidateQuestion]:
        concepts = [c.term for c in analysis.main_concepts[:MAX_PROMPT_CONCEPTS]]
        count = min(MAX_MODEL_QUESTIONS, params.max_questions)
        prompt = self.prompt_builder.build_general_prompt(
            content, concepts, count, [t.value for t in params.question_types]
        )

        try:
            response = await self.llm_manager.generate_response(prompt, timeout=self.timeout)
        except Exception as e:
            logger.warning(f"Model question generation failed: {e}")
            return []

        result = parse_question_array(response.content)
        if not result.ok:
            logger.warning(f"Model question generation returned no usable questions: {result.error}")
            return []

        questions = []
        for index, item in enumerate(result.items):
            question = self._to_question(item, index, content)
            if question is not None:
                questions.append(question)

        logger.debug(f"Model produced {len(questions)} questions from {len(result.items)} items")
        return questions[:count]

    @staticmethod
    def _to_question(item: Dict[str, Any], index: int, content: str) -> Optional[CandidateQuestion]:
        question_text = text_field(item, "question")
        answer = text_field(item, "correctAnswer")
        if not question_text or answer is None:
            logger.debug(f"Dropping model item {index}: missing question or correctAnswer")
            return None

        question_type = question_type_field(item, QuestionType.SHORT_ANSWER)
        topic = text_field(item, "topic") or DEFAULT_TOPIC

        return CandidateQuestion(
            id=new_question_id("ai", index),
            question_text=question_text,
            options=list_field(item, "options") if question_type == QuestionType.MULTIPLE_CHOICE else None,
            correct_answer=answer,
            type=question_type,
            difficulty=text_field(item, "difficulty") or DEFAULT_DIFFICULTY,
            explanation=text_field(item, "explanation"),
            topic=topic,
            bloom_level=enum_field(item, "bloomLevel", BloomLevel, DEFAULT_BLOOM_LEVEL),
            source_chunk=text_field(item, "sourceChunk") or extract_relevant_context(content, question_text, answer),
            concepts_tested=[topic],
            educational_value=MODEL_QUESTION_BASE_VALUE,
            cognitive_load=CognitiveLoad.MEDIUM,
        )


class TemplateStrategy(GenerationStrategy):
    """Definition-significance and true/false templates for the first main concepts."""

    name = "template"

    async def generate(
        self,
        content: str,
        analysis: ContentAnalysis,
        params: GenerationParams
    ) -> List[CandidateQuestion]:
        concepts = analysis.main_concepts[:MAX_TEMPLATE_CONCEPTS][:TEMPLATE_QUESTIONS_PER_KIND]
        questions = []

        for index, concept in enumerate(concepts):
            term = concept.term
            correct = f"{term} is an important concept discussed in the content"
            questions.append(CandidateQuestion(
                id=new_question_id("template_def", index),
                question_text=f"What is the significance of {term} in this context?",
                type=QuestionType.MULTIPLE_CHOICE,
                options=[
                    correct,
                    f"{term} is barely mentioned",
                    f"{term} is not relevant to the topic",
                    f"{term} is used as a counterexample",
                ],
                correct_answer=correct,
                difficulty="medium",
                explanation=f"{term} is identified as a key concept with high importance in the content.",
                topic=term,
                bloom_level=BloomLevel.UNDERSTAND,
                source_chunk=_concept_source(concept, content),
                concepts_tested=[term],
                educational_value=TEMPLATE_QUESTION_BASE_VALUE,
                cognitive_load=CognitiveLoad.MEDIUM,
            ))

        for index, concept in enumerate(concepts):
            term = concept.term
            questions.append(CandidateQuestion(
                id=new_question_id("template_tf", index),
                question_text=f"True or False: {term} is essential for understanding the main topic discussed.",
                type=QuestionType.TRUE_FALSE,
                correct_answer="True",
                difficulty="easy",
                explanation=f"{term} is a main concept that helps explain the core ideas.",
                topic=term,
                bloom_level=BloomLevel.UNDERSTAND,
                source_chunk=_concept_source(concept, content),
                concepts_tested=[term],
                educational_value=TEMPLATE_QUESTION_BASE_VALUE,
                cognitive_load=CognitiveLoad.LOW,
            ))

        return questions


class ConceptEnumerationStrategy(GenerationStrategy):
    """One fill-in-the-blank question per main concept."""

    name = "concept_enumeration"

    async def generate(
        self,
        content: str,
        analysis: ContentAnalysis,
        params: GenerationParams
    ) -> List[CandidateQuestion]:
        return [
            CandidateQuestion(
                id=new_question_id("concept", index),
                question_text="Fill in the blank: _____ is a key concept that helps explain the main ideas in this content.",
                type=QuestionType.FILL_IN_BLANK,
                correct_answer=concept.term,
                difficulty="medium",
                explanation=f"{concept.term} is identified as a key concept in the content analysis.",
                topic=concept.term,
                bloom_level=BloomLevel.REMEMBER,
                source_chunk=_concept_source(concept, content),
                concepts_tested=[concept.term],
                educational_value=CONCEPT_QUESTION_BASE_VALUE,
                cognitive_load=CognitiveLoad.LOW,
            )
            for index, concept in enumerate(analysis.main_concepts[:MAX_ENUMERATED_CONCEPTS])
        ]


# ============================================================================
# Exam-level strategies
# ============================================================================

class ExamModelStrategy(GenerationStrategy):
    """
    Base for exam-level strategies: model first, template on any failure.

    Subclasses choose their concepts, prompt, item mapping and template.
    """

    share: float = 0.0
    max_prompt_questions: int = 1
    concept_limit: int = MAX_PROMPT_CONCEPTS
    min_concepts: int = 1

    def __init__(
        self,
        llm_manager: Optional[LLMManager] = None,
        prompt_builder: Optional[QuestionPromptBuilder] = None,
        timeout: Optional[float] = None
    ):
        self.llm_manager = llm_manager or get_llm_manager()
        self.prompt_builder = prompt_builder or QuestionPromptBuilder()
        self.timeout = timeout or settings.llm.short_request_timeout

    def question_count(self, params: GenerationParams) -> int:
        return math.ceil(params.max_questions * self.share)

    async def generate(
        self,
        content: str,
        analysis: ContentAnalysis,
        params: GenerationParams
    ) -> List[CandidateQuestion]:
        count = self.question_count(params)
        concepts = analysis.main_concepts[:self.concept_limit]

        if len(concepts) < self.min_concepts:
            logger.debug(f"{self.name}: not enough main concepts, using templates")
            return self.template(content, self.template_concepts(analysis, count), params, count)

        if not self.llm_manager.is_available:
            logger.warning(f"{self.name}: no model API key configured, using template generation")
            return self.template(content, concepts, params, count)

        prompt = self.build_prompt(content, analysis, concepts, params, min(count, self.max_prompt_questions))

        try:
            response = await self.llm_manager.generate_response(prompt, timeout=self.timeout)
            result = parse_question_array(response.content)
            if not result.ok:
                logger.warning(f"{self.name}: {result.error}, using template generation")
                return self.template(content, concepts, params, count)

            questions = [
                self.to_question(item, index, content, concepts, params)
                for index, item in enumerate(result.items)
            ]
        except Exception as e:
            logger.error(f"{self.name} question generation failed: {e}")
            return self.template(content, concepts, params, count)

        return questions[:count]

    def template_concepts(self, analysis: ContentAnalysis, count: int) -> List[ConceptInfo]:
        return list(analysis.key_concepts[:count])

    @abstractmethod
    def build_prompt(
        self,
        content: str,
        analysis: ContentAnalysis,
        concepts: Sequence[ConceptInfo],
        params: GenerationParams,
        count: int
    ) -> str:
        ...

    @abstractmethod
    def to_question(
        self,
        item: Dict[str, Any],
        index: int,
        content: str,
        concepts: Sequence[ConceptInfo],
        params: GenerationParams
    ) -> CandidateQuestion:
        ...

    @abstractmethod
    def template(
        self,
        content: str,
        concepts: Sequence[ConceptInfo],
        params: GenerationParams,
        count: int
    ) -> List[CandidateQuestion]:
        ...


class ConceptMasteryStrategy(ExamModelStrategy):
    """Deep-understanding questions about up to five main concepts."""

    name = "concept_mastery"
    share = CONCEPT_MASTERY_SHARE
    max_prompt_questions = MAX_CONCEPT_MASTERY_QUESTIONS

    def __init__(
        self,
        llm_manager: Optional[LLMManager] = None,
        prompt_builder: Optional[QuestionPromptBuilder] = None,
        timeout: Optional[float] = None
    ):
        super().__init__(llm_manager, prompt_builder, timeout or settings.llm.request_timeout)

    def template_concepts(self, analysis: ContentAnalysis, count: int) -> List[ConceptInfo]:
        return list(analysis.key_concepts[:3])

    def build_prompt(self, content, analysis, concepts, params, count) -> str:
        return self.prompt_builder.build_concept_mastery_prompt(
            content, analysis, [c.term for c in concepts], count, params.exam_level
        )

    def to_question(self, item, index, content, concepts, params) -> CandidateQuestion:
        concept_term = concepts[index % len(concepts)].term or DEFAULT_CONCEPT_TERM
        first_term = concepts[0].term or DEFAULT_TOPIC

        question_text = text_field(item, "question")
        question_type = question_type_field(item, QuestionType.SHORT_ANSWER)
        topic = text_field(item, "topic")

        return CandidateQuestion(
            id=new_question_id("concept", index),
            question_text=question_text or f"What is the significance of {concept_term}?",
            options=list_field(item, "options") if question_type == QuestionType.MULTIPLE_CHOICE else None,
            correct_answer=text_field(item, "correctAnswer") or concept_term,
            type=question_type,
            difficulty=text_field(item, "difficulty") or "intermediate",
            explanation=text_field(item, "explanation") or "This tests understanding of key concepts.",
            topic=topic or first_term,
            bloom_level=enum_field(item, "bloomLevel", BloomLevel, DEFAULT_BLOOM_LEVEL),
            source_chunk=text_field(item, "sourceChunk") or extract_relevant_context(content, question_text),
            concepts_tested=list_field(item, "conceptTested") or [topic or first_term],
            educational_value=9,
            cognitive_load=CognitiveLoad.MEDIUM,
            exam_level=enum_field(item, "examLevel", ExamLevel, params.exam_level or DEFAULT_EXAM_LEVEL),
            time_to_answer=int_field(item, "timeToAnswer") or DEFAULT_TIME_TO_ANSWER,
            hints_available=list_field(item, "hintsAvailable") or [],
            common_mistakes=list_field(item, "commonMistakes") or [],
            related_concepts=[c.term for c in concepts if c.term != topic],
        )

    def template(self, content, concepts, params, count) -> List[CandidateQuestion]:
        return basic_concept_questions(content, concepts, count)


class ApplicationStrategy(ExamModelStrategy):
    """Scenario-based questions applying up to three main concepts."""

    name = "application"
    share = APPLICATION_SHARE
    max_prompt_questions = MAX_APPLICATION_QUESTIONS
    concept_limit = 3

    def build_prompt(self, content, analysis, concepts, params, count) -> str:
        return self.prompt_builder.build_application_prompt(content, [c.term for c in concepts], count)

    def to_question(self, item, index, content, concepts, params) -> CandidateQuestion:
        term = concepts[index % len(concepts)].term or DEFAULT_TOPIC
        question_text = text_field(item, "question")
        topic = text_field(item, "topic") or term

        return CandidateQuestion(
            id=new_question_id("application", index),
            question_text=question_text or f"How would you apply the concept of {term} in a practical scenario?",
            type=QuestionType.SHORT_ANSWER,
            correct_answer=text_field(item, "correctAnswer") or (
                f"{term} can be applied by understanding its principles and implementing them in relevant contexts."
            ),
            difficulty="advanced",
            explanation=text_field(item, "explanation") or (
                f"This question tests the ability to apply {term} in practical situations."
            ),
            topic=topic,
            bloom_level=BloomLevel.APPLY,
            source_chunk=extract_relevant_context(content, question_text),
            concepts_tested=[topic],
            educational_value=8,
            cognitive_load=CognitiveLoad.HIGH,
            exam_level=params.exam_level or ExamLevel.PROFESSIONAL,
            time_to_answer=180,
            hints_available=[f"Think about real-world scenarios where {topic} would be relevant"],
            common_mistakes=["Describing the concept without showing how to apply it"],
            related_concepts=[c.term for c in concepts],
        )

    def template(self, content, concepts, params, count) -> List[CandidateQuestion]:
        return template_application_questions(content, concepts, params.exam_level)


class AnalyticalStrategy(ExamModelStrategy):
    """Compare-and-contrast questions about the two leading main concepts."""

    name = "analytical"
    share = ANALYTICAL_SHARE
    max_prompt_questions = MAX_ANALYTICAL_QUESTIONS
    concept_limit = 2
    min_concepts = 2

    def template_concepts(self, analysis: ContentAnalysis, count: int) -> List[ConceptInfo]:
        return list(analysis.key_concepts[:2])

    def build_prompt(self, content, analysis, concepts, params, count) -> str:
        return self.prompt_builder.build_analytical_prompt(content, [c.term for c in concepts], count)

    def to_question(self, item, index, content, concepts, params) -> CandidateQuestion:
        first, second = concepts[0].term, concepts[1].term
        question_text = text_field(item, "question")

        return CandidateQuestion(
            id=new_question_id("analytical", index),
            question_text=question_text or (
                f"Compare and analyze the relationship between {first} and {second}. "
                f"What are the key similarities and differences?"
            ),
            type=QuestionType.SHORT_ANSWER,
            correct_answer=text_field(item, "correctAnswer") or (
                f"{first} and {second} are related concepts that share similarities but differ "
                f"in their specific applications and characteristics."
            ),
            difficulty="advanced",
            explanation=text_field(item, "explanation") or (
                "This question tests analytical thinking by requiring comparison and relationship analysis."
            ),
            topic=text_field(item, "topic") or f"{first} vs {second}",
            bloom_level=BloomLevel.ANALYZE,
            source_chunk=extract_relevant_context(content, question_text),
            concepts_tested=[first, second],
            educational_value=9,
            cognitive_load=CognitiveLoad.HIGH,
            exam_level=params.exam_level or ExamLevel.GRADUATE,
            time_to_answer=240,
            hints_available=["Focus on both similarities and differences", "Consider the broader context"],
            common_mistakes=["Only describing concepts without comparing them"],
            related_concepts=[c.term for c in concepts],
        )

    def template(self, content, concepts, params, count) -> List[CandidateQuestion]:
        return template_analytical_questions(content, concepts, params.exam_level)

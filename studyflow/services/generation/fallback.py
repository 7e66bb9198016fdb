"""
Template Fallback Generation

Deterministic question templates used when the model is unavailable,
returns nothing usable, or the content is unsuitable for exam-level
generation. Nothing here calls an external service.
"""

import logging
import re
from typing import List, Optional, Sequence

from ...core.constants import (
    CAPITALIZED_TERM_PATTERN,
    DEFAULT_CONCEPT_TERM,
    SHORT_SOURCE_CHUNK_LENGTH,
    SOURCE_CHUNK_LENGTH,
)
from ...models.enums import BloomLevel, CognitiveLoad, ExamLevel, QuestionType
from ...models.schemas import (
    CandidateQuestion,
    ConceptInfo,
    ContentAnalysis,
    GenerationParams,
    GenerationResult,
)
from ..quality.metadata import MetadataSummarizer
from .question_parser import new_question_id

logger = logging.getLogger(__name__)


def content_excerpt(content: str, length: int = SOURCE_CHUNK_LENGTH) -> str:
    return content[:length] + "..."


def concept_source(concept: ConceptInfo, content: str) -> str:
    """First recorded context of a concept, or the start of the content."""
    return concept.context[0] if concept.context else content_excerpt(content)


def basic_concept_questions(
    content: str,
    concepts: Sequence[ConceptInfo],
    count: int
) -> List[CandidateQuestion]:
    """Short-answer significance questions, one per concept."""
    terms = [c.term for c in concepts]
    questions = []

    for index, concept in enumerate(concepts[:count]):
        term = concept.term
        questions.append(CandidateQuestion(
            id=new_question_id("basic", index),
            question_text=f"What is the significance of {term} in this context?",
            type=QuestionType.SHORT_ANSWER,
            correct_answer=f"{term} is a key concept that helps understand the main ideas discussed in the material.",
            difficulty="intermediate",
            explanation=f"This question tests basic understanding of {term}.",
            topic=term,
            bloom_level=BloomLevel.UNDERSTAND,
            source_chunk=concept_source(concept, content),
            concepts_tested=[term],
            educational_value=7,
            cognitive_load=CognitiveLoad.MEDIUM,
            exam_level=ExamLevel.STANDARDIZED,
            time_to_answer=120,
            hints_available=["Think about the role this concept plays in the material"],
            common_mistakes=["Giving too brief an answer without explanation"],
            related_concepts=[t for t in terms if t != term],
        ))

    return questions


def template_application_questions(
    content: str,
    concepts: Sequence[ConceptInfo],
    exam_level: Optional[ExamLevel] = None
) -> List[CandidateQuestion]:
    """Scenario questions for the first two concepts."""
    terms = [c.term for c in concepts]
    questions = []

    for index, concept in enumerate(concepts[:2]):
        term = concept.term or DEFAULT_CONCEPT_TERM
        questions.append(CandidateQuestion(
            id=new_question_id("template_app", index),
            question_text=f"How would you apply the concept of {term} in a practical scenario?",
            type=QuestionType.SHORT_ANSWER,
            correct_answer=(
                f"{term} can be applied by understanding its principles and implementing them "
                f"in relevant contexts to achieve specific goals."
            ),
            difficulty="advanced",
            explanation=f"This question tests the ability to apply {term} in practical situations.",
            topic=term,
            bloom_level=BloomLevel.APPLY,
            source_chunk=concept_source(concept, content),
            concepts_tested=[term],
            educational_value=8,
            cognitive_load=CognitiveLoad.HIGH,
            exam_level=exam_level or ExamLevel.PROFESSIONAL,
            time_to_answer=180,
            hints_available=[f"Think about real-world scenarios where {term} would be relevant"],
            common_mistakes=[f"Describing {term} without showing how to apply it"],
            related_concepts=terms,
        ))

    return questions


def template_analytical_questions(
    content: str,
    concepts: Sequence[ConceptInfo],
    exam_level: Optional[ExamLevel] = None
) -> List[CandidateQuestion]:
    """A single comparison question, or a general analysis question when fewer than two concepts exist."""
    terms = [c.term for c in concepts]
    level = exam_level or ExamLevel.GRADUATE

    if len(concepts) < 2:
        return [CandidateQuestion(
            id=new_question_id("template_analysis"),
            question_text="Analyze the main ideas presented in this content. What are the key insights?",
            type=QuestionType.SHORT_ANSWER,
            correct_answer=(
                "The content presents important concepts that work together to build "
                "understanding of the subject matter."
            ),
            difficulty="advanced",
            explanation="This question tests analytical thinking about the content's main themes.",
            topic="Content Analysis",
            bloom_level=BloomLevel.ANALYZE,
            source_chunk=content_excerpt(content),
            concepts_tested=["General Analysis"],
            educational_value=8,
            cognitive_load=CognitiveLoad.HIGH,
            exam_level=level,
            time_to_answer=240,
            hints_available=["Consider the overall themes and their relationships"],
            common_mistakes=["Being too superficial in the analysis"],
            related_concepts=terms,
        )]

    first, second = terms[0], terms[1]
    return [CandidateQuestion(
        id=new_question_id("template_analysis"),
        question_text=(
            f"Compare and analyze the relationship between {first} and {second}. "
            f"What are the key similarities and differences?"
        ),
        type=QuestionType.SHORT_ANSWER,
        correct_answer=(
            f"{first} and {second} are related concepts that share some similarities but differ in "
            f"their specific applications and characteristics. Understanding their relationship "
            f"helps build comprehensive knowledge."
        ),
        difficulty="advanced",
        explanation="This question tests analytical thinking by requiring comparison and relationship analysis.",
        topic=f"{first} vs {second}",
        bloom_level=BloomLevel.ANALYZE,
        source_chunk=content_excerpt(content),
        concepts_tested=[first, second],
        educational_value=9,
        cognitive_load=CognitiveLoad.HIGH,
        exam_level=level,
        time_to_answer=240,
        hints_available=["Focus on both similarities and differences", "Consider the broader context"],
        common_mistakes=["Only describing concepts without comparing them"],
        related_concepts=terms,
    )]


class ComprehensiveFallback:
    """
    Guaranteed-success generator for exam-level requests.

    Rotates multiple choice, true/false, fill-in-the-blank and short answer
    templates across the analysed concepts. Without concepts it falls back
    to capitalised words of the text, then to generic placeholders.
    """

    def __init__(self, summarizer: Optional[MetadataSummarizer] = None):
        self.summarizer = summarizer or MetadataSummarizer()

    def generate(
        self,
        content: str,
        analysis: ContentAnalysis,
        params: GenerationParams
    ) -> GenerationResult:
        logger.info("Using comprehensive fallback question generation")

        max_questions = params.max_questions
        if analysis.key_concepts:
            concepts = list(analysis.key_concepts[:max_questions])
        else:
            concepts = self.concepts_from_content(content, max_questions)

        terms = [c.term for c in concepts]
        questions = []
        for index, concept in enumerate(concepts):
            related = [t for t in terms if t != concept.term]
            questions.append(self._build(index, concept, content, related, params.exam_level))

        questions = questions[:max_questions]
        metadata = self.summarizer.summarize_advanced(questions, [])
        return GenerationResult(questions=questions, metadata=metadata)

    @staticmethod
    def concepts_from_content(content: str, max_concepts: int) -> List[ConceptInfo]:
        """Capitalised words of the text as stand-in concepts."""
        context = [content_excerpt(content, SHORT_SOURCE_CHUNK_LENGTH)]
        unique_terms = list(dict.fromkeys(re.findall(CAPITALIZED_TERM_PATTERN, content)))[:max_concepts]

        if not unique_terms:
            return [
                ConceptInfo(term=f"concept {i + 1}", context=context)
                for i in range(min(max_concepts, 3))
            ]

        return [ConceptInfo(term=term, context=context) for term in unique_terms]

    def _build(
        self,
        index: int,
        concept: ConceptInfo,
        content: str,
        related: List[str],
        exam_level: Optional[ExamLevel]
    ) -> CandidateQuestion:
        term = concept.term or DEFAULT_CONCEPT_TERM
        source = concept_source(concept, content)
        kind = index % 4

        if kind == 0:
            correct = f"{term} is discussed as an important concept"
            return CandidateQuestion(
                id=new_question_id("fallback_mc", index),
                question_text=f"According to the content, which statement about {term} is most accurate?",
                type=QuestionType.MULTIPLE_CHOICE,
                options=[
                    correct,
                    f"{term} is mentioned only briefly",
                    f"{term} is not relevant to the main topic",
                    f"{term} is used as a counterexample",
                ],
                correct_answer=correct,
                difficulty="medium",
                explanation=f"{term} is identified as a key concept in the content analysis.",
                topic=term,
                bloom_level=BloomLevel.UNDERSTAND,
                source_chunk=source,
                concepts_tested=[term],
                educational_value=7,
                cognitive_load=CognitiveLoad.MEDIUM,
                exam_level=exam_level or ExamLevel.STANDARDIZED,
                time_to_answer=90,
                hints_available=[f"Look for mentions of {term} in the content"],
                common_mistakes=[f"Confusing {term} with other concepts"],
                related_concepts=related,
            )

        if kind == 1:
            return CandidateQuestion(
                id=new_question_id("fallback_tf", index),
                question_text=f"True or False: The content discusses {term} as an important concept.",
                type=QuestionType.TRUE_FALSE,
                correct_answer="True",
                difficulty="easy",
                explanation=f"{term} is mentioned and discussed in the content.",
                topic=term,
                bloom_level=BloomLevel.REMEMBER,
                source_chunk=source,
                concepts_tested=[term],
                educational_value=6,
                cognitive_load=CognitiveLoad.LOW,
                exam_level=exam_level or ExamLevel.CLASSROOM,
                time_to_answer=60,
                hints_available=[f"Consider how {term} is presented in the material"],
                common_mistakes=[f"Not recognizing the importance of {term}"],
                related_concepts=related,
            )

        if kind == 2:
            return CandidateQuestion(
                id=new_question_id("fallback_fib", index),
                question_text="Fill in the blank: _____ is a key concept that helps understand the main ideas in this content.",
                type=QuestionType.FILL_IN_BLANK,
                correct_answer=term,
                difficulty="medium",
                explanation=f"{term} is identified as a key concept in the content analysis.",
                topic=term,
                bloom_level=BloomLevel.REMEMBER,
                source_chunk=source,
                concepts_tested=[term],
                educational_value=6,
                cognitive_load=CognitiveLoad.LOW,
                exam_level=exam_level or ExamLevel.CLASSROOM,
                time_to_answer=75,
                hints_available=["Think about the main concepts discussed in the content"],
                common_mistakes=["Using a related but incorrect concept"],
                related_concepts=related,
            )

        return CandidateQuestion(
            id=new_question_id("fallback_sa", index),
            question_text=f"Explain the importance of {term} based on the material.",
            type=QuestionType.SHORT_ANSWER,
            correct_answer=(
                f"{term} is important because it represents a fundamental aspect of the subject "
                f"matter that helps build understanding of the key ideas presented."
            ),
            difficulty="medium",
            explanation=f"This question tests comprehension of {term} and its role in the material.",
            topic=term,
            bloom_level=BloomLevel.UNDERSTAND,
            source_chunk=source,
            concepts_tested=[term],
            educational_value=7,
            cognitive_load=CognitiveLoad.MEDIUM,
            exam_level=exam_level or ExamLevel.STANDARDIZED,
            time_to_answer=120,
            hints_available=[f"Consider the context in which {term} is discussed"],
            common_mistakes=["Providing only a definition without explaining importance"],
            related_concepts=related,
        )

"""
StudyFlow - Question Validator Service

This module scores generated questions for educational value, filters
out weak candidates and checks whether study material is suitable for
question generation at all.
"""

import logging
from typing import List, NamedTuple, Optional

from ...core.config import settings
from ...core.constants import (
    BASE_EDUCATIONAL_VALUE,
    EXAM_MIN_CONCEPT_IMPORTANCE,
    EXAM_MIN_EDUCATIONAL_VALUE,
    EXAM_TRIVIAL_ANSWER_WORDS,
    EXPLANATION_BONUS,
    FEW_OPTIONS_PENALTY,
    HIGHER_ORDER_BLOOM_LEVELS,
    HIGHER_ORDER_BONUS,
    MAX_EDUCATIONAL_VALUE,
    MIN_ANSWER_LENGTH,
    MIN_CONTENT_LENGTH,
    MIN_EDUCATIONAL_VALUE,
    MIN_EXPLANATION_BONUS_LENGTH,
    MIN_MEANINGFUL_TERM_LENGTH,
    MIN_MULTIPLE_CHOICE_OPTIONS,
    MIN_QUESTION_LENGTH,
    SHORT_ANSWER_PASS_LENGTH,
    SHORT_ANSWER_PENALTY,
    SHORT_QUESTION_PENALTY,
    STANDARD_MIN_CONCEPT_IMPORTANCE,
    STANDARD_MIN_EDUCATIONAL_VALUE,
    TRIVIAL_ANSWER_PENALTY,
    TRIVIAL_ANSWER_WORDS,
    TRUE_FALSE_ANSWERS,
    UNRELATED_CONCEPT_PENALTY,
    UNSUPPORTED_ANSWER_PENALTY,
)
from ...models.enums import GenerationMode, QuestionType
from ...models.schemas import CandidateQuestion, ContentAnalysis, ValidationResult
from .text_matching import conceptual_match, fuzzy_match, partial_match

logger = logging.getLogger(__name__)


class QualityScorer:
    """
    Rule-based scorer assigning a 0-10 educational value to a question.

    Scoring starts from a fixed base and applies penalties and bonuses.
    It is a pure function of the question, the analysis and the text.
    """

    def __init__(self, threshold: Optional[float] = None, max_issues: Optional[int] = None):
        """
        Initialize quality scorer.

        Args:
            threshold: Minimum educational value of a valid question
            max_issues: Maximum number of issues a valid question may have
        """
        self.threshold = threshold if threshold is not None else settings.generation.min_educational_value
        self.max_issues = max_issues if max_issues is not None else settings.generation.max_issues

    def validate_question_quality(
        self,
        question: CandidateQuestion,
        analysis: ContentAnalysis,
        content: str
    ) -> ValidationResult:
        """
        Score a single question.

        Args:
            question: Candidate question
            analysis: Analysis of the source content
            content: Source text

        Returns:
            Validation result with score and issues
        """
        issues: List[str] = []
        suggestions: List[str] = []
        value = BASE_EDUCATIONAL_VALUE

        question_text = question.question_text or ""
        answer = question.correct_answer or ""
        answer_lower = answer.lower()

        if len(question_text) < MIN_QUESTION_LENGTH:
            issues.append("Question text too short")
            suggestions.append("Rephrase the question with more context")
            value -= SHORT_QUESTION_PENALTY

        if answer_lower in TRIVIAL_ANSWER_WORDS:
            issues.append("Answer is a trivial word")
            suggestions.append("Use a concept or term from the content as the answer")
            value -= TRIVIAL_ANSWER_PENALTY

        if answer and len(answer) < MIN_ANSWER_LENGTH:
            issues.append("Answer too short")
            value -= SHORT_ANSWER_PENALTY

        all_concepts = [concept.term.lower() for concept in analysis.key_concepts]
        question_lower = question_text.lower()

        relates_to_concepts = any(
            concept in question_lower
            or concept in answer_lower
            or answer_lower in concept
            or fuzzy_match(answer_lower, concept)
            for concept in all_concepts
        )
        if not relates_to_concepts:
            issues.append("Question does not relate to identified concepts")
            suggestions.append("Focus the question on one of the key concepts")
            value -= UNRELATED_CONCEPT_PENALTY

        content_lower = content.lower()
        content_related = (
            len(answer_lower) <= SHORT_ANSWER_PASS_LENGTH
            or answer_lower in content_lower
            or partial_match(answer_lower, content_lower)
            or conceptual_match(answer_lower, all_concepts)
            or question.type == QuestionType.TRUE_FALSE
            or answer in TRUE_FALSE_ANSWERS
        )
        if not content_related:
            issues.append("Answer not clearly related to content")
            value -= UNSUPPORTED_ANSWER_PENALTY

        if question.type == QuestionType.MULTIPLE_CHOICE and question.options is not None:
            if len(question.options) < MIN_MULTIPLE_CHOICE_OPTIONS:
                issues.append("Too few options")
                suggestions.append("Provide at least three options")
                value -= FEW_OPTIONS_PENALTY

        if question.explanation and len(question.explanation) > MIN_EXPLANATION_BONUS_LENGTH:
            value += EXPLANATION_BONUS

        if question.bloom_level in HIGHER_ORDER_BLOOM_LEVELS:
            value += HIGHER_ORDER_BONUS

        value = max(MIN_EDUCATIONAL_VALUE, min(MAX_EDUCATIONAL_VALUE, value))

        return ValidationResult(
            is_valid=value >= self.threshold and len(issues) <= self.max_issues,
            educational_value=value,
            issues=issues,
            suggestions=suggestions,
        )

    def validate_and_rank(
        self,
        questions: List[CandidateQuestion],
        analysis: ContentAnalysis,
        content: str
    ) -> List[CandidateQuestion]:
        """
        Keep valid questions, record their scores and sort them best first.

        The sort is stable: equally scored questions keep generation order.
        """
        validated = []

        for question in questions:
            validation = self.validate_question_quality(question, analysis, content)
            if validation.is_valid and validation.educational_value >= self.threshold:
                question.educational_value = validation.educational_value
                validated.append(question)
            else:
                logger.debug(f"Question filtered out: {', '.join(validation.issues)}")

        validated.sort(key=lambda q: q.educational_value, reverse=True)
        logger.info(f"Quality filter kept {len(validated)}/{len(questions)} questions")
        return validated


class ExamLevelValidator:
    """
    Lenient structural filter used by exam-level generation.

    Questions keep the educational value assigned by their strategy.
    """

    def is_acceptable(self, question: CandidateQuestion) -> bool:
        if not question.question_text or len(question.question_text) < MIN_QUESTION_LENGTH:
            return False
        if not question.correct_answer or len(question.correct_answer) < MIN_ANSWER_LENGTH:
            return False
        if not question.source_chunk:
            return False
        if question.correct_answer.lower().strip() in EXAM_TRIVIAL_ANSWER_WORDS:
            return False
        return True

    def validate_and_rank(
        self,
        questions: List[CandidateQuestion],
        analysis: ContentAnalysis,
        content: str
    ) -> List[CandidateQuestion]:
        validated = [q for q in questions if self.is_acceptable(q)]
        validated.sort(key=lambda q: q.educational_value, reverse=True)
        logger.info(f"Exam-level filter kept {len(validated)}/{len(questions)} questions")
        return validated


class SuitabilityCheck(NamedTuple):
    """Outcome of a content suitability check."""
    suitable: bool
    reason: Optional[str] = None


class ContentSuitabilityChecker:
    """
    Decides whether analysed content can support question generation.

    Standard mode uses the lower thresholds; exam-level mode asks for a
    slightly higher educational value and concept importance.
    """

    def __init__(self, mode: GenerationMode = GenerationMode.STANDARD):
        self.mode = mode
        if mode == GenerationMode.EXAM_LEVEL:
            self.min_educational_value = EXAM_MIN_EDUCATIONAL_VALUE
            self.min_concept_importance = EXAM_MIN_CONCEPT_IMPORTANCE
        else:
            self.min_educational_value = STANDARD_MIN_EDUCATIONAL_VALUE
            self.min_concept_importance = STANDARD_MIN_CONCEPT_IMPORTANCE

    def check(self, analysis: ContentAnalysis, content: str) -> SuitabilityCheck:
        exam = self.mode == GenerationMode.EXAM_LEVEL

        if len(content) < MIN_CONTENT_LENGTH:
            if exam:
                return SuitabilityCheck(False, "Content too short for comprehensive exam questions (minimum 100 characters)")
            return SuitabilityCheck(False, "Content too short (minimum 100 characters)")

        if not analysis.key_concepts:
            if exam:
                return SuitabilityCheck(False, "No educational concepts found for meaningful question generation")
            return SuitabilityCheck(False, "No identifiable educational concepts found")

        if analysis.educational_value < self.min_educational_value:
            if exam:
                return SuitabilityCheck(
                    False,
                    f"Content educational value too low ({analysis.educational_value:g}/10, "
                    f"minimum {self.min_educational_value}/10)"
                )
            return SuitabilityCheck(False, "Content has very low educational value for question generation")

        meaningful = [
            c for c in analysis.key_concepts
            if len(c.term) > MIN_MEANINGFUL_TERM_LENGTH and c.importance > self.min_concept_importance
        ]
        if not meaningful:
            if exam:
                return SuitabilityCheck(False, "No high-quality concepts found for exam question generation")
            return SuitabilityCheck(False, "No meaningful concepts found for question generation")

        return SuitabilityCheck(True)

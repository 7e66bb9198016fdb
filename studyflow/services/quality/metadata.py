"""
Generation Metadata Service

Aggregates a selected question set into reporting statistics.
"""

import logging
import math
from collections import Counter
from typing import Dict, Iterable, List

from ...core.constants import DETAILED_EXPLANATION_LENGTH, HIGH_EDUCATIONAL_VALUE
from ...models.schemas import (
    AdvancedGenerationMetadata,
    CandidateQuestion,
    GenerationMetadata,
    QualityMetrics,
)

logger = logging.getLogger(__name__)


def _distribution(values: Iterable[str]) -> Dict[str, int]:
    return dict(Counter(values))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _enum_value(value) -> str:
    return getattr(value, "value", value)


class MetadataSummarizer:
    """Pure aggregation over selected questions."""

    def summarize(
        self,
        selected: List[CandidateQuestion],
        generated: List[CandidateQuestion]
    ) -> GenerationMetadata:
        """
        Build the basic report for a standard generation.

        Args:
            selected: Final question set
            generated: Every candidate produced before filtering

        Returns:
            Basic metadata
        """
        return GenerationMetadata(
            total_generated=len(generated),
            quality_filtered=len(selected),
            average_quality=self._average_quality(selected),
            concepts_covered=self._concepts_covered(selected),
            difficulty_distribution=_distribution(q.difficulty for q in selected),
        )

    def summarize_advanced(
        self,
        selected: List[CandidateQuestion],
        generated: List[CandidateQuestion]
    ) -> AdvancedGenerationMetadata:
        """
        Build the exam-level report.

        When no candidates were produced upstream (fallback path), the
        selected set counts as the generated set.
        """
        average_time = (
            sum(q.time_to_answer for q in selected) / len(selected) if selected else 0
        )

        return AdvancedGenerationMetadata(
            total_generated=len(generated) or len(selected),
            quality_filtered=len(selected),
            average_quality=self._average_quality(selected),
            concepts_covered=self._concepts_covered(selected),
            difficulty_distribution=_distribution(q.difficulty for q in selected),
            bloom_distribution=_distribution(_enum_value(q.bloom_level) for q in selected),
            type_distribution=_distribution(_enum_value(q.type) for q in selected),
            exam_level_distribution=_distribution(_enum_value(q.exam_level) for q in selected),
            average_time_to_answer=_round_half_up(average_time),
            quality_metrics=QualityMetrics(
                high_educational_value=sum(1 for q in selected if q.educational_value >= HIGH_EDUCATIONAL_VALUE),
                has_explanations=sum(
                    1 for q in selected
                    if q.explanation and len(q.explanation) > DETAILED_EXPLANATION_LENGTH
                ),
                has_hints=sum(1 for q in selected if q.hints_available),
                has_common_mistakes=sum(1 for q in selected if q.common_mistakes),
            ),
        )

    @staticmethod
    def _average_quality(selected: List[CandidateQuestion]) -> float:
        if not selected:
            return 0.0
        average = sum(q.educational_value for q in selected) / len(selected)
        return _round_half_up(average * 10) / 10

    @staticmethod
    def _concepts_covered(selected: List[CandidateQuestion]) -> List[str]:
        covered = dict.fromkeys(
            concept for q in selected for concept in q.covered_concepts
        )
        return [concept for concept in covered if concept]

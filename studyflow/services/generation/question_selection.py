"""
Question Selection Service

Picks a bounded, diverse final set from ranked candidates.
Follows SRP by focusing solely on selection logic.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence

from ...core.constants import BLOOM_TARGET_DISTRIBUTION, DIVERSITY_BOOTSTRAP_CONCEPTS
from ...models.enums import BloomLevel
from ...models.schemas import CandidateQuestion

logger = logging.getLogger(__name__)


def _fill_remaining(
    selected: List[CandidateQuestion],
    candidates: Sequence[CandidateQuestion],
    max_questions: int
) -> List[CandidateQuestion]:
    """Top up the selection with the best candidates not chosen yet, in ranked order."""
    chosen = {id(q) for q in selected}
    for question in candidates:
        if len(selected) >= max_questions:
            break
        if id(question) not in chosen:
            selected.append(question)
            chosen.add(id(question))
    return selected[:max_questions]


class DiversitySelector:
    """
    Two-pass greedy selection favouring concept coverage.

    The first pass accepts a candidate when it brings a new concept (or while
    fewer than two concepts are covered); the second pass fills any remaining
    slots, so the result always holds min(N, len(candidates)) questions.
    """

    def select(self, candidates: Sequence[CandidateQuestion], max_questions: int) -> List[CandidateQuestion]:
        """
        Select up to ``max_questions`` candidates.

        Args:
            candidates: Validated candidates, best first
            max_questions: Target count

        Returns:
            Selected questions
        """
        if len(candidates) <= max_questions:
            return list(candidates)

        selected: List[CandidateQuestion] = []
        used_concepts: set = set()

        for question in candidates:
            if len(selected) >= max_questions:
                break
            concepts = question.covered_concepts
            has_new_concept = any(c not in used_concepts for c in concepts)
            if has_new_concept or len(used_concepts) < DIVERSITY_BOOTSTRAP_CONCEPTS:
                selected.append(question)
                used_concepts.update(concepts)

        logger.debug(f"Diversity pass selected {len(selected)} questions covering {len(used_concepts)} concepts")
        return _fill_remaining(selected, candidates, max_questions)


class BloomDistributionSelector:
    """
    Exam-level selection targeting a Bloom's taxonomy mix.

    Each level gets ceil(N * share) slots; levels without enough candidates
    leave their slots to the fill pass.
    """

    def __init__(self, target_distribution: Optional[Dict[BloomLevel, float]] = None):
        self.target_distribution = target_distribution or BLOOM_TARGET_DISTRIBUTION

    def targets(self, max_questions: int) -> Dict[BloomLevel, int]:
        return {
            level: math.ceil(max_questions * share)
            for level, share in self.target_distribution.items()
        }

    def select(self, candidates: Sequence[CandidateQuestion], max_questions: int) -> List[CandidateQuestion]:
        if len(candidates) <= max_questions:
            return list(candidates)

        ranked = sorted(candidates, key=lambda q: q.educational_value, reverse=True)
        selected: List[CandidateQuestion] = []
        chosen: set = set()

        for level, target in self.targets(max_questions).items():
            pool = [q for q in ranked if q.bloom_level == level and id(q) not in chosen]
            for question in pool[:target]:
                if len(selected) >= max_questions:
                    break
                selected.append(question)
                chosen.add(id(question))
            if len(selected) >= max_questions:
                break

        logger.debug(f"Bloom pass selected {len(selected)}/{max_questions} questions")
        return _fill_remaining(selected, ranked, max_questions)


def filter_previous_answered(
    candidates: List[CandidateQuestion],
    previous_answered: Sequence[str]
) -> List[CandidateQuestion]:
    """
    Drop candidates whose id or question text was already answered.

    The unfiltered list is kept when filtering would leave nothing.
    """
    if not previous_answered:
        return candidates

    answered = {entry.strip().lower() for entry in previous_answered if entry}
    remaining = [
        q for q in candidates
        if q.id.lower() not in answered and q.question_text.strip().lower() not in answered
    ]

    if not remaining:
        logger.info("Every candidate was previously answered, keeping the full pool")
        return candidates

    if len(remaining) < len(candidates):
        logger.debug(f"Skipped {len(candidates) - len(remaining)} previously answered questions")
    return remaining


def prioritize_focus_areas(
    questions: List[CandidateQuestion],
    focus_areas: Sequence[str]
) -> List[CandidateQuestion]:
    """
    Move questions about a focus area to the front, keeping relative order.

    A question matches when its topic or one of its tested concepts contains
    a focus area (case-insensitive).
    """
    areas = [area.lower() for area in focus_areas if area]
    if not areas:
        return questions

    def matches(question: CandidateQuestion) -> bool:
        topic = question.topic.lower()
        concepts = [c.lower() for c in question.concepts_tested]
        return any(area in topic or any(area in c for c in concepts) for area in areas)

    focused = [q for q in questions if matches(q)]
    others = [q for q in questions if not matches(q)]
    logger.debug(f"Prioritized {len(focused)} focus-area questions")
    return focused + others

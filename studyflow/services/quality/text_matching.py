"""
Text Matching Helpers

Loose string matching used by the quality scorer to decide whether an
answer relates to the analysed concepts or to the source text.
"""

import re
from typing import Iterable

from ...core.constants import (
    FUZZY_MATCH_RATIO,
    FUZZY_MIN_LENGTH,
    PARTIAL_MATCH_MIN_WORD_LENGTH,
    PARTIAL_MATCH_RATIO,
)


def fuzzy_match(first: str, second: str) -> bool:
    """
    Per-character containment test.

    Counts the characters of the shorter string that appear anywhere in the
    longer one. This is not an edit distance.

    Args:
        first: First string
        second: Second string

    Returns:
        True if more than 60% of the shorter string's characters occur in the longer one
    """
    if not first or not second:
        return False

    if len(first) > len(second):
        longer, shorter = first, second
    else:
        longer, shorter = second, first

    if len(shorter) < FUZZY_MIN_LENGTH:
        return False

    matches = sum(1 for char in shorter if char in longer)
    return matches / len(shorter) > FUZZY_MATCH_RATIO


def partial_match(answer: str, text: str) -> bool:
    """Check whether most of the answer's significant words appear in the text."""
    if not answer or len(answer) < 3:
        return False

    words = [word for word in re.split(r"\s+", answer) if len(word) >= PARTIAL_MATCH_MIN_WORD_LENGTH]
    if not words:
        return False

    found = [word for word in words if word in text]
    return len(found) / len(words) > PARTIAL_MATCH_RATIO


def conceptual_match(answer: str, concepts: Iterable[str]) -> bool:
    """Check whether the answer overlaps any concept by containment or fuzzy match."""
    return any(
        answer in concept or concept in answer or fuzzy_match(answer, concept)
        for concept in concepts
    )

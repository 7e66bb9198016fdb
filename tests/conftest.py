"""
StudyFlow - Pytest Configuration and Fixtures

Common fixtures for the test suite: a hand-built content analysis, study
text that mentions its concepts, and completion service doubles.
"""

import os
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")

from studyflow.models.enums import BloomLevel, ContentDifficulty, QuestionType  # noqa: E402
from studyflow.models.schemas import (  # noqa: E402
    CandidateQuestion,
    ConceptInfo,
    ContentAnalysis,
    GenerationParams,
)
from studyflow.services.analysis.content_analyzer import ContentAnalyzer  # noqa: E402
from studyflow.services.llm.llm_manager import LLMManager, LLMResponse  # noqa: E402


MITOSIS_TEXT = (
    "Mitosis is the process by which a eukaryotic cell separates the chromosomes in its "
    "nucleus into two identical sets. During mitosis each Chromosome is copied and the "
    "copies are pulled apart by the spindle. Cytokinesis follows mitosis and divides the "
    "cytoplasm, producing two daughter cells. Errors in mitosis can lead to cells with an "
    "abnormal number of chromosomes, which is why the spindle checkpoint is important. "
    "Understanding mitosis and cytokinesis explains how tissues grow and repair themselves."
)


@pytest.fixture
def mitosis_content() -> str:
    """Study text mentioning every concept of the mitosis analysis."""
    return MITOSIS_TEXT


@pytest.fixture
def mitosis_analysis() -> ContentAnalysis:
    """Analysis with three main concepts and one minor concept."""
    return ContentAnalysis(
        key_concepts=[
            ConceptInfo(
                term="Mitosis",
                frequency=6,
                importance=9.0,
                context=["Mitosis is the process by which a eukaryotic cell separates the chromosomes."],
                definitions=["the process by which a eukaryotic cell separates the chromosomes"],
                is_main_concept=True,
            ),
            ConceptInfo(
                term="Cytokinesis",
                frequency=2,
                importance=8.0,
                context=["Cytokinesis follows mitosis and divides the cytoplasm, producing two daughter cells."],
                is_main_concept=True,
            ),
            ConceptInfo(
                term="Chromosome",
                frequency=2,
                importance=7.5,
                context=["During mitosis each Chromosome is copied and the copies are pulled apart by the spindle."],
                is_main_concept=True,
            ),
            ConceptInfo(term="spindle", frequency=2, importance=4.0),
        ],
        learning_objectives=["Explain how Mitosis relates to the main topic"],
        difficulty_level=ContentDifficulty.INTERMEDIATE,
        content_quality=6.0,
        educational_value=6.0,
    )


@pytest.fixture
def default_params() -> GenerationParams:
    return GenerationParams(max_questions=5)


def make_llm_manager(
    content: Optional[str] = None,
    side_effect: Any = None,
    available: bool = True
) -> MagicMock:
    """LLMManager double whose generate_response returns ``content`` or raises ``side_effect``."""
    manager = MagicMock(spec=LLMManager)
    manager.is_available = available
    manager.generate_response = AsyncMock(
        return_value=LLMResponse(content=content or "", model="gemini-test"),
        side_effect=side_effect,
    )
    return manager


@pytest.fixture
def llm_factory():
    """Factory building completion service doubles."""
    return make_llm_manager


@pytest.fixture
def unavailable_llm() -> MagicMock:
    """A manager without an API key: every call is refused."""
    from studyflow.core.exceptions import ConfigurationError

    return make_llm_manager(
        side_effect=ConfigurationError("Gemini API key not configured", error_code="LLM_NOT_CONFIGURED"),
        available=False,
    )


@pytest.fixture
def stub_analyzer(mitosis_analysis: ContentAnalysis) -> MagicMock:
    """Analyzer always returning the mitosis analysis."""
    analyzer = MagicMock(spec=ContentAnalyzer)
    analyzer.analyze.return_value = mitosis_analysis
    return analyzer


def make_question(
    question_id: str,
    concepts: Optional[List[str]] = None,
    bloom_level: BloomLevel = BloomLevel.UNDERSTAND,
    educational_value: float = 7.0,
    **overrides: Any
) -> CandidateQuestion:
    """Build a candidate question with sensible defaults."""
    data: Dict[str, Any] = {
        "id": question_id,
        "question_text": f"What does question {question_id} ask about the material?",
        "correct_answer": "Mitosis",
        "type": QuestionType.SHORT_ANSWER,
        "explanation": "Mitosis is the key concept of this material.",
        "topic": (concepts or ["General"])[0],
        "bloom_level": bloom_level,
        "educational_value": educational_value,
        "concepts_tested": concepts if concepts is not None else [],
        "source_chunk": "Mitosis is the process by which a eukaryotic cell separates the chromosomes.",
    }
    data.update(overrides)
    return CandidateQuestion(**data)


@pytest.fixture
def question_factory():
    return make_question

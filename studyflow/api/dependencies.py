"""
StudyFlow - FastAPI Dependencies

Service instances injected into the API routes. Tests override these
through ``app.dependency_overrides``.
"""

import logging

from ..services.analysis.content_analyzer import ContentAnalyzer, get_content_analyzer
from ..services.generation.question_generator import QuestionGenerator, get_question_generator

logger = logging.getLogger(__name__)


def get_question_generator_service() -> QuestionGenerator:
    """
    Get question generator service dependency.

    Returns:
        Question generator instance
    """
    return get_question_generator()


def get_content_analyzer_service() -> ContentAnalyzer:
    return get_content_analyzer()

"""
StudyFlow - Question Generation API Routes

Standard generation rejects unsuitable content with a 422; exam-level
generation always answers, falling back to template questions.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...core.exceptions import UnsuitableContentError
from ...models.schemas import ContentAnalysisRequest, QuestionGenerationRequest
from ...services.analysis.content_analyzer import ContentAnalyzer
from ...services.generation.question_generator import QuestionGenerator, exam_level_for_content
from ..dependencies import get_content_analyzer_service, get_question_generator_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/generation", tags=["generation"])


@router.post("/questions", response_model=None)
async def generate_questions(
    request: QuestionGenerationRequest,
    generator: QuestionGenerator = Depends(get_question_generator_service)
) -> Any:
    """
    Generate questions for a content chunk with strict quality scoring.

    Args:
        request: Content and generation parameters
        generator: Question generator

    Returns:
        Selected questions and metadata, or a 422 for unsuitable content
    """
    logger.info(f"Question generation requested: {len(request.content)} chars, "
                f"max_questions={request.params.max_questions}")
    try:
        result = await generator.generate_comprehensive_questions(request.content, request.params)
    except UnsuitableContentError as e:
        logger.info(f"Rejected unsuitable content: {e.reason}")
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=e.to_dict())

    return result.model_dump(mode="json", by_alias=True)


@router.post("/exam", response_model=Dict[str, Any])
async def generate_exam_questions(
    request: QuestionGenerationRequest,
    generator: QuestionGenerator = Depends(get_question_generator_service)
) -> Dict[str, Any]:
    """
    Generate exam-level questions; never rejects content.

    When the request does not name an exam level, it is derived from the
    analysed difficulty of the content.
    """
    analysis = generator.analyze(request.content)
    params = request.params
    if params.exam_level is None:
        params = params.model_copy(update={"exam_level": exam_level_for_content(analysis)})
        logger.debug(f"Exam level resolved from content: {params.exam_level.value}")

    result = await generator.generate_exam_level_questions(request.content, analysis, params)
    return result.model_dump(mode="json", by_alias=True)


@router.post("/analyze", response_model=Dict[str, Any])
async def analyze_content(
    request: ContentAnalysisRequest,
    analyzer: ContentAnalyzer = Depends(get_content_analyzer_service)
) -> Dict[str, Any]:
    analysis = analyzer.analyze(request.content)
    return analysis.model_dump(mode="json", by_alias=True)

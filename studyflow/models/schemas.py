"""
StudyFlow - Pydantic Schemas

Data models exchanged between the content analyzer, the generation
pipeline and the HTTP API.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator
from pydantic.alias_generators import to_camel

from ..core.config import settings
from ..core.constants import (
    DEFAULT_BLOOM_LEVEL,
    DEFAULT_COGNITIVE_LOAD,
    DEFAULT_DIFFICULTY,
    DEFAULT_EXAM_LEVEL,
    DEFAULT_TIME_TO_ANSWER,
    DEFAULT_TOPIC,
)
from .enums import (
    BloomLevel,
    CognitiveLoad,
    ContentDifficulty,
    ExamLevel,
    QuestionType,
    RelationshipType,
    TermType,
)


class CamelModel(BaseModel):
    """Base model serialising to camelCase for API consumers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(BaseModel):
    """Immutable camelCase model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ============================================================================
# Content Analysis
# ============================================================================

class ConceptInfo(FrozenCamelModel):
    """A concept extracted from study material."""

    term: str
    frequency: int = 1
    importance: float = Field(default=0.0, ge=0.0, le=10.0)
    context: List[str] = Field(default_factory=list)
    definitions: List[str] = Field(default_factory=list)
    is_main_concept: bool = False


class TopicInfo(FrozenCamelModel):
    """A topic cluster built from paragraphs sharing a main concept."""

    topic: str
    relevance: float = 0.0
    keywords: List[str] = Field(default_factory=list)
    coherence_score: float = 0.0


class TermInfo(FrozenCamelModel):
    """An important term with its classification."""

    term: str
    type: TermType = TermType.CONCEPT
    importance: float = 0.0
    context: str = ""


class ConceptRelationship(FrozenCamelModel):
    """Relationship inferred between two co-occurring concepts."""

    concept1: str
    concept2: str
    relationship: RelationshipType
    strength: float = Field(ge=0.0, le=1.0)
    evidence: List[str] = Field(default_factory=list)


class ContentAnalysis(FrozenCamelModel):
    """Result of analysing one chunk of study material."""

    key_concepts: List[ConceptInfo] = Field(default_factory=list)
    main_topics: List[TopicInfo] = Field(default_factory=list)
    learning_objectives: List[str] = Field(default_factory=list)
    important_terms: List[TermInfo] = Field(default_factory=list)
    conceptual_relationships: List[ConceptRelationship] = Field(default_factory=list)
    difficulty_level: ContentDifficulty = ContentDifficulty.INTERMEDIATE
    content_quality: float = 0.0
    educational_value: float = Field(default=0.0, ge=0.0, le=10.0)
    readability_score: float = 5.0
    topic_coherence: float = 0.0

    @property
    def main_concepts(self) -> List[ConceptInfo]:
        """Concepts flagged as main concepts, in ranking order."""
        return [concept for concept in self.key_concepts if concept.is_main_concept]


# ============================================================================
# Questions
# ============================================================================

class CandidateQuestion(CamelModel):
    """A generated question, before or after quality scoring."""

    id: str
    question_text: str
    options: Optional[List[str]] = None
    correct_answer: str
    type: QuestionType
    difficulty: str = DEFAULT_DIFFICULTY
    explanation: Optional[str] = None
    topic: str = DEFAULT_TOPIC
    bloom_level: BloomLevel = DEFAULT_BLOOM_LEVEL
    educational_value: float = 0.0
    concepts_tested: List[str] = Field(default_factory=list)
    source_chunk: str = ""

    # Exam-level extensions
    cognitive_load: CognitiveLoad = DEFAULT_COGNITIVE_LOAD
    exam_level: ExamLevel = DEFAULT_EXAM_LEVEL
    time_to_answer: int = DEFAULT_TIME_TO_ANSWER
    hints_available: List[str] = Field(default_factory=list)
    common_mistakes: List[str] = Field(default_factory=list)
    related_concepts: List[str] = Field(default_factory=list)

    @field_validator("concepts_tested")
    @classmethod
    def dedupe_concepts(cls, v: List[str]) -> List[str]:
        # Ordered set semantics
        return list(dict.fromkeys(v))

    @property
    def covered_concepts(self) -> List[str]:
        """Concepts used for diversity and coverage accounting."""
        return self.concepts_tested or [self.topic]


class ValidationResult(CamelModel):
    """Outcome of scoring a single candidate question."""

    is_valid: bool
    educational_value: float
    issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    @property
    def quality_score(self) -> float:
        return self.educational_value


# ============================================================================
# Generation Request / Result
# ============================================================================

class GenerationParams(CamelModel):
    """Parameters accepted by the question generation pipeline."""

    max_questions: int = Field(
        default_factory=lambda: settings.generation.default_max_questions,
        ge=1,
        description="Number of questions to return"
    )
    question_types: List[QuestionType] = Field(
        default_factory=lambda: list(settings.generation.default_question_types)
    )
    difficulty_level: int = Field(default=50, ge=0, le=100)
    previous_answered: List[str] = Field(default_factory=list)
    exam_level: Optional[ExamLevel] = None
    focus_areas: List[str] = Field(default_factory=list)
    document_title: Optional[str] = None

    @field_validator("max_questions")
    @classmethod
    def validate_max_questions(cls, v: int) -> int:
        limit = settings.generation.max_questions_limit
        if v > limit:
            raise ValueError(f"max_questions cannot exceed {limit}")
        return v


class QualityMetrics(CamelModel):
    """Counts of quality markers in a selected question set."""

    high_educational_value: int = 0
    has_explanations: int = 0
    has_hints: int = 0
    has_common_mistakes: int = 0


class GenerationMetadata(CamelModel):
    """Reporting statistics for a generation request."""

    total_generated: int = 0
    quality_filtered: int = 0
    average_quality: float = 0.0
    concepts_covered: List[str] = Field(default_factory=list)
    difficulty_distribution: Dict[str, int] = Field(default_factory=dict)


class AdvancedGenerationMetadata(GenerationMetadata):
    """Exam-level statistics including taxonomy and exam distributions."""

    bloom_distribution: Dict[str, int] = Field(default_factory=dict)
    type_distribution: Dict[str, int] = Field(default_factory=dict)
    exam_level_distribution: Dict[str, int] = Field(default_factory=dict)
    average_time_to_answer: int = 0
    quality_metrics: QualityMetrics = Field(default_factory=QualityMetrics)


class GenerationResult(CamelModel):
    """Selected questions plus reporting metadata."""

    questions: List[CandidateQuestion] = Field(default_factory=list)
    metadata: SerializeAsAny[GenerationMetadata] = Field(default_factory=GenerationMetadata)


# ============================================================================
# API Requests
# ============================================================================

class QuestionGenerationRequest(CamelModel):
    """Body of the generation endpoints."""

    content: str = Field(..., min_length=1, description="Study material chunk")
    params: GenerationParams = Field(default_factory=GenerationParams)


class ContentAnalysisRequest(CamelModel):
    """Body of the analysis endpoint."""

    content: str = Field(..., min_length=1)

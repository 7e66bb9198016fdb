"""
StudyFlow - Enumerations

Shared enum types for question generation, content analysis and
application configuration.
"""

from enum import Enum


class QuestionType(str, Enum):
    """Supported question formats."""

    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    FILL_IN_BLANK = "fill_in_blank"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"
    APPLICATION = "application"


class BloomLevel(str, Enum):
    """Bloom's taxonomy cognitive levels."""

    REMEMBER = "remember"
    UNDERSTAND = "understand"
    APPLY = "apply"
    ANALYZE = "analyze"
    EVALUATE = "evaluate"
    CREATE = "create"


class ExamLevel(str, Enum):
    """Target exam rigor."""

    CLASSROOM = "classroom"
    STANDARDIZED = "standardized"
    PROFESSIONAL = "professional"
    GRADUATE = "graduate"


class CognitiveLoad(str, Enum):
    """Expected effort to answer a question."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContentDifficulty(str, Enum):
    """Difficulty of the analysed study material."""

    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class RelationshipType(str, Enum):
    """Kinds of relationship inferred between two concepts."""

    DEFINES = "defines"
    EXPLAINS = "explains"
    CONTRASTS = "contrasts"
    EXEMPLIFIES = "exemplifies"
    CAUSES = "causes"
    RELATES_TO = "relates_to"


class TermType(str, Enum):
    """Classification of an important term."""

    TECHNICAL = "technical"
    CONCEPT = "concept"
    DEFINITION = "definition"
    EXAMPLE = "example"


class GenerationMode(str, Enum):
    """Pipeline configuration used for a request."""

    STANDARD = "standard"
    EXAM_LEVEL = "exam_level"


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

"""
StudyFlow - Application Constants

This module defines the constants shared by the question generation
pipeline: default field values, scoring thresholds and selection targets.
"""

from ..models.enums import BloomLevel, CognitiveLoad, ExamLevel

# ============================================================================
# Application Information
# ============================================================================

APP_DESCRIPTION = "Educational question generation from study material"

# ============================================================================
# Question Defaults
# ============================================================================

DEFAULT_TOPIC = "General"
DEFAULT_DIFFICULTY = "medium"
DEFAULT_BLOOM_LEVEL = BloomLevel.UNDERSTAND
DEFAULT_COGNITIVE_LOAD = CognitiveLoad.MEDIUM
DEFAULT_EXAM_LEVEL = ExamLevel.STANDARDIZED
DEFAULT_TIME_TO_ANSWER = 90
DEFAULT_CONCEPT_TERM = "key concept"

# Score given to model-generated candidates before validation
MODEL_QUESTION_BASE_VALUE = 8
TEMPLATE_QUESTION_BASE_VALUE = 7
CONCEPT_QUESTION_BASE_VALUE = 6

# Characters kept when a source chunk is derived from the content
SOURCE_CHUNK_LENGTH = 150
SHORT_SOURCE_CHUNK_LENGTH = 100

# ============================================================================
# Quality Scoring
# ============================================================================

BASE_EDUCATIONAL_VALUE = 8
MIN_EDUCATIONAL_VALUE = 0
MAX_EDUCATIONAL_VALUE = 10

MIN_QUESTION_LENGTH = 10
MIN_ANSWER_LENGTH = 2
MIN_MULTIPLE_CHOICE_OPTIONS = 3
MIN_EXPLANATION_BONUS_LENGTH = 20
SHORT_ANSWER_PASS_LENGTH = 3

SHORT_QUESTION_PENALTY = 3
TRIVIAL_ANSWER_PENALTY = 6
SHORT_ANSWER_PENALTY = 2
UNRELATED_CONCEPT_PENALTY = 2
UNSUPPORTED_ANSWER_PENALTY = 1
FEW_OPTIONS_PENALTY = 1
EXPLANATION_BONUS = 1
HIGHER_ORDER_BONUS = 1

TRIVIAL_ANSWER_WORDS = frozenset({
    "the", "and", "or", "a", "an", "is", "are", "was", "were",
    "to", "in", "on", "at", "for", "with", "by",
})

# Exam-level filter only rejects articles and conjunctions
EXAM_TRIVIAL_ANSWER_WORDS = frozenset({"the", "and", "or", "a", "an"})

HIGHER_ORDER_BLOOM_LEVELS = frozenset({
    BloomLevel.APPLY,
    BloomLevel.ANALYZE,
    BloomLevel.EVALUATE,
})

TRUE_FALSE_ANSWERS = frozenset({"True", "False"})

# ============================================================================
# Text Matching
# ============================================================================

FUZZY_MIN_LENGTH = 3
FUZZY_MATCH_RATIO = 0.6
PARTIAL_MATCH_RATIO = 0.5
PARTIAL_MATCH_MIN_WORD_LENGTH = 3

# ============================================================================
# Content Suitability
# ============================================================================

MIN_CONTENT_LENGTH = 100
STANDARD_MIN_EDUCATIONAL_VALUE = 2
STANDARD_MIN_CONCEPT_IMPORTANCE = 2
EXAM_MIN_EDUCATIONAL_VALUE = 3
EXAM_MIN_CONCEPT_IMPORTANCE = 3
MIN_MEANINGFUL_TERM_LENGTH = 2

# ============================================================================
# Generation
# ============================================================================

MAX_PROMPT_CONCEPTS = 5
MAX_MODEL_QUESTIONS = 6
MAX_TEMPLATE_CONCEPTS = 4
TEMPLATE_QUESTIONS_PER_KIND = 2
MAX_ENUMERATED_CONCEPTS = 3

CONCEPT_MASTERY_SHARE = 0.4
APPLICATION_SHARE = 0.3
ANALYTICAL_SHARE = 0.3

MAX_CONCEPT_MASTERY_QUESTIONS = 4
MAX_APPLICATION_QUESTIONS = 3
MAX_ANALYTICAL_QUESTIONS = 2
EXAM_PROMPT_CONTENT_LIMIT = 1500

CAPITALIZED_TERM_PATTERN = r"\b[A-Z][a-zA-Z]{3,}\b"
JSON_ARRAY_PATTERN = r"\[\s*\{[\s\S]*\}\s*\]"

# ============================================================================
# Selection
# ============================================================================

DIVERSITY_BOOTSTRAP_CONCEPTS = 2

BLOOM_TARGET_DISTRIBUTION = {
    BloomLevel.REMEMBER: 0.2,
    BloomLevel.UNDERSTAND: 0.3,
    BloomLevel.APPLY: 0.3,
    BloomLevel.ANALYZE: 0.2,
}

# ============================================================================
# Metadata
# ============================================================================

HIGH_EDUCATIONAL_VALUE = 8
DETAILED_EXPLANATION_LENGTH = 30

# ============================================================================
# Content Analysis
# ============================================================================

MAX_KEY_CONCEPTS = 20
MAX_CONTEXTS_PER_CONCEPT = 3
MAX_TOPICS = 8
MAX_IMPORTANT_TERMS = 15
MAX_FREQUENT_TERMS = 15
MAX_LEARNING_OBJECTIVES = 5
MAX_RELATIONSHIPS = 10
MIN_TERM_FREQUENCY = 3
MAIN_CONCEPT_SHARE = 0.3
MIN_MAIN_CONCEPTS = 3
MAIN_CONCEPT_IMPORTANCE = 7

ANALYSIS_STOP_WORDS = frozenset({
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "an", "a", "this", "that", "these", "those", "is", "are", "was", "were",
    "be", "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "can", "must", "then", "than",
    "when", "where", "why", "how", "what", "which", "who", "whom", "whose",
    "some", "any", "each", "every", "all", "both", "either", "neither",
    "more", "most", "less", "least", "much", "many", "few", "several",
    "other", "another", "same", "different", "such", "very", "really",
    "just", "only", "also", "even", "still", "already", "yet", "again",
})

ABSTRACT_TERMS = (
    "theory", "concept", "framework", "principle",
    "methodology", "paradigm", "hypothesis",
)

OBJECTIVE_ACTION_VERBS = {
    "basic": ["Identify", "Define", "List", "Describe"],
    "intermediate": ["Explain", "Compare", "Analyze", "Classify"],
    "advanced": ["Evaluate", "Create", "Synthesize", "Critique"],
}

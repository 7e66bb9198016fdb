"""
Question Prompt Builder Service

Handles the creation of prompts for question generation.
Follows SRP by focusing solely on prompt construction.
"""

import logging
from typing import List, Optional

from ...core.config import settings
from ...core.constants import EXAM_PROMPT_CONTENT_LIMIT
from ...models.enums import ExamLevel
from ...models.schemas import ContentAnalysis

logger = logging.getLogger(__name__)


GENERAL_PROMPT = """
# EDUCATIONAL QUESTION GENERATION

Create {count} educational questions from this content.

## CONTENT:
{content}

## KEY CONCEPTS TO TEST: {concepts}

## REQUIREMENTS:
1. Questions must test understanding of: {concepts}
2. Answers should be concepts, terms, or ideas from the content
3. Focus on "why" and "how", not just "what"
4. Make questions educational and meaningful

## QUESTION TYPES:
{type_lines}

## OUTPUT FORMAT (JSON):
[
  {{
    "id": "q1",
    "question": "Question text here",
    "type": "{type_choices}",
    "options": ["A", "B", "C", "D"],
    "correctAnswer": "Correct answer from content",
    "difficulty": "easy|medium|hard",
    "explanation": "Why this answer is correct",
    "topic": "Main concept tested",
    "sourceChunk": "Quote from content supporting answer"
  }}
]

Only multiple_choice questions have "options".

Generate questions now:"""

CONCEPT_MASTERY_PROMPT = """
# EXAM-LEVEL EDUCATIONAL QUESTION GENERATION - CONCEPT MASTERY

You are an expert exam designer creating questions that test DEEP UNDERSTANDING, not just memorization.

## CONTENT TO ANALYZE:
{content}

## KEY CONCEPTS TO TEST:
{concepts}

## EDUCATIONAL OBJECTIVES:
{objectives}

## QUESTION REQUIREMENTS:
1. **DEPTH OVER BREADTH**: Test understanding of WHY and HOW, not just WHAT
2. **REAL UNDERSTANDING**: Questions should reveal if students truly grasp the concepts
3. **EXAM-LEVEL RIGOR**: Questions should match {exam_level} exam standards
4. **AVOID TRIVIAL RECALL**: No questions answerable by simple keyword matching
5. **TEST RELATIONSHIPS**: Focus on how concepts connect and interact

## OUTPUT FORMAT (JSON):
Create {count} questions in this format:
[
  {{
    "id": "concept_q1",
    "question": "Meaningful question that tests deep understanding",
    "type": "multiple_choice|short_answer",
    "options": ["A", "B", "C", "D"],
    "correctAnswer": "Thoughtful answer that demonstrates understanding",
    "difficulty": "intermediate",
    "explanation": "Detailed explanation of why this answer is correct",
    "topic": "Main concept being tested",
    "sourceChunk": "Relevant quote from the content"
  }}
]

Generate questions now:"""

APPLICATION_PROMPT = """
# APPLICATION-LEVEL QUESTION GENERATION

Create practical application questions based on this content:

## CONTENT:
{content}

## CONCEPTS TO APPLY: {concepts}

## REQUIREMENTS:
1. Test ability to APPLY concepts in real scenarios
2. Focus on practical implementation
3. Avoid theoretical definitions
4. Create scenario-based questions

## OUTPUT FORMAT (JSON):
[
  {{
    "question": "How would you apply [concept] in [scenario]?",
    "type": "short_answer",
    "correctAnswer": "Application-focused answer",
    "explanation": "Why this application works",
    "topic": "concept name"
  }}
]

Generate {count} questions:"""

ANALYTICAL_PROMPT = """
# ANALYTICAL QUESTION GENERATION

Create analytical questions that test critical thinking:

## CONTENT:
{content}

## CONCEPTS TO ANALYZE: {concepts}

## REQUIREMENTS:
1. Test analysis and evaluation skills
2. Compare and contrast concepts
3. Examine relationships and implications
4. Require critical thinking

## OUTPUT FORMAT (JSON):
[
  {{
    "question": "Compare and analyze...",
    "type": "short_answer",
    "correctAnswer": "Analytical response",
    "explanation": "Analysis explanation",
    "topic": "comparative analysis"
  }}
]

Generate {count} questions:"""

TYPE_DESCRIPTIONS = {
    "multiple_choice": "Multiple choice: Test conceptual understanding",
    "true_false": "True/False: Test relationships between concepts",
    "fill_in_blank": 'Fill in blank: Test key terms (not common words like "the", "and")',
    "short_answer": "Short answer: Test explanations and applications",
    "essay": "Essay: Test synthesis of several concepts",
    "application": "Application: Test use of concepts in new situations",
}


class QuestionPromptBuilder:
    """
    Service responsible for building prompts for question generation.

    Keeps prompt wording in one place so strategies only supply data.
    """

    def __init__(self, content_limit: Optional[int] = None):
        """
        Initialize the prompt builder.

        Args:
            content_limit: Characters of study text embedded in general prompts
        """
        self.content_limit = content_limit or settings.generation.prompt_content_limit

    def build_general_prompt(
        self,
        content: str,
        concepts: List[str],
        count: int,
        question_types: Optional[List[str]] = None
    ) -> str:
        types = [t for t in (question_types or []) if t in TYPE_DESCRIPTIONS]
        if not types:
            types = ["multiple_choice", "true_false", "fill_in_blank", "short_answer"]

        logger.debug(f"Building general prompt for {count} questions on {len(concepts)} concepts")
        return GENERAL_PROMPT.format(
            count=count,
            content=content[:self.content_limit],
            concepts=", ".join(concepts),
            type_lines="\n".join(f"- {TYPE_DESCRIPTIONS[t]}" for t in types),
            type_choices="|".join(types),
        )

    def build_concept_mastery_prompt(
        self,
        content: str,
        analysis: ContentAnalysis,
        concepts: List[str],
        count: int,
        exam_level: Optional[ExamLevel] = None
    ) -> str:
        objectives = "\n".join(analysis.learning_objectives) or "Test understanding of main concepts"
        level = exam_level.value if exam_level else ExamLevel.STANDARDIZED.value
        return CONCEPT_MASTERY_PROMPT.format(
            content=content[:self.content_limit],
            concepts=", ".join(concepts),
            objectives=objectives,
            exam_level=level,
            count=count,
        )

    def build_application_prompt(self, content: str, concepts: List[str], count: int) -> str:
        return APPLICATION_PROMPT.format(
            content=content[:EXAM_PROMPT_CONTENT_LIMIT],
            concepts=", ".join(concepts),
            count=count,
        )

    def build_analytical_prompt(self, content: str, concepts: List[str], count: int) -> str:
        return ANALYTICAL_PROMPT.format(
            content=content[:EXAM_PROMPT_CONTENT_LIMIT],
            concepts=", ".join(concepts),
            count=count,
        )

"""
Question Parser Service

Extracts question data from free-text model completions.
Parsing never raises: callers get a tagged ParseResult and decide how to degrade.
"""

import json
import logging
import re
import time
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field

from ...core.constants import JSON_ARRAY_PATTERN
from ...models.enums import QuestionType

logger = logging.getLogger(__name__)

E = TypeVar("E")

_JSON_ARRAY_RE = re.compile(JSON_ARRAY_PATTERN)


class ParseResult(BaseModel):
    """Either the parsed items or the reason parsing failed."""

    ok: bool
    items: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def success(cls, items: List[Dict[str, Any]]) -> "ParseResult":
        return cls(ok=True, items=items)

    @classmethod
    def failure(cls, reason: str) -> "ParseResult":
        return cls(ok=False, error=reason)


def parse_question_array(response_text: str) -> ParseResult:
    """
    Locate and decode the first JSON array of objects in a completion.

    Args:
        response_text: Raw completion text

    Returns:
        ParseResult holding the object items of the array
    """
    if not response_text:
        return ParseResult.failure("Empty model response")

    match = _JSON_ARRAY_RE.search(response_text)
    if not match:
        return ParseResult.failure("No JSON array found in model response")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        return ParseResult.failure(f"Invalid JSON in model response: {e}")

    if not isinstance(data, list):
        return ParseResult.failure("Model response JSON is not an array")

    items = [item for item in data if isinstance(item, dict)]
    if len(items) < len(data):
        logger.debug(f"Ignored {len(data) - len(items)} non-object entries in model response")

    return ParseResult.success(items)


# ----------------------------------------------------------------------
# Field coercion helpers
# ----------------------------------------------------------------------

def text_field(item: Dict[str, Any], key: str) -> Optional[str]:
    """Return a non-empty string field, or None."""
    value = item.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return str(value)


def list_field(item: Dict[str, Any], key: str) -> Optional[List[str]]:
    """Return a non-empty list of strings, or None."""
    value = item.get(key)
    if not isinstance(value, list) or not value:
        return None
    return [str(entry) for entry in value]


def enum_field(item: Dict[str, Any], key: str, enum_type: Type[E], default: E) -> E:
    """Parse an enum field, falling back to the default on absent or unknown values."""
    value = item.get(key)
    if not value:
        return default
    try:
        return enum_type(str(value).strip().lower())
    except ValueError:
        logger.debug(f"Unknown {key} '{value}', using {default}")
        return default


def question_type_field(item: Dict[str, Any], default: QuestionType) -> QuestionType:
    return enum_field(item, "type", QuestionType, default)


def new_question_id(prefix: str, index: Optional[int] = None) -> str:
    """Build a question id from a strategy prefix and a millisecond timestamp."""
    stamp = int(time.time() * 1000)
    if index is None:
        return f"{prefix}_{stamp}"
    return f"{prefix}_{stamp}_{index}"


def int_field(item: Dict[str, Any], key: str) -> Optional[int]:
    value = item.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    return None

"""
StudyFlow - Question Parser Tests
"""

import pytest

from studyflow.models.enums import BloomLevel, QuestionType
from studyflow.services.generation.question_parser import (
    enum_field,
    int_field,
    list_field,
    new_question_id,
    parse_question_array,
    question_type_field,
    text_field,
)


pytestmark = pytest.mark.unit


class TestParseQuestionArray:

    def test_array_embedded_in_prose(self):
        text = 'Here are your questions:\n```json\n[{"question": "What is mitosis?", "correctAnswer": "Division"}]\n```'

        result = parse_question_array(text)

        assert result.ok is True
        assert result.items == [{"question": "What is mitosis?", "correctAnswer": "Division"}]

    @pytest.mark.parametrize("text", ["", "No questions today.", "[1, 2, 3]"])
    def test_no_object_array(self, text):
        result = parse_question_array(text)

        assert result.ok is False
        assert result.error

    def test_invalid_json(self):
        result = parse_question_array('[{"question": "What is mitosis?",}]')

        assert result.ok is False
        assert result.error.startswith("Invalid JSON")

    def test_non_object_entries_dropped(self):
        result = parse_question_array('[{"question": "A?"}, "stray", {"question": "B?"}]')

        assert [item["question"] for item in result.items] == ["A?", "B?"]


class TestFieldHelpers:

    def test_text_field(self):
        item = {"question": "Why?", "empty": "", "number": 4}

        assert text_field(item, "question") == "Why?"
        assert text_field(item, "empty") is None
        assert text_field(item, "missing") is None
        assert text_field(item, "number") == "4"

    def test_list_field(self):
        assert list_field({"options": ["a", 2]}, "options") == ["a", "2"]
        assert list_field({"options": []}, "options") is None
        assert list_field({"options": "a, b"}, "options") is None

    def test_enum_field(self):
        assert enum_field({"bloomLevel": " Apply "}, "bloomLevel", BloomLevel, BloomLevel.UNDERSTAND) == BloomLevel.APPLY
        assert enum_field({"bloomLevel": "memorize"}, "bloomLevel", BloomLevel, BloomLevel.UNDERSTAND) == BloomLevel.UNDERSTAND
        assert question_type_field({}, QuestionType.SHORT_ANSWER) == QuestionType.SHORT_ANSWER

    def test_int_field(self):
        assert int_field({"timeToAnswer": 120}, "timeToAnswer") == 120
        assert int_field({"timeToAnswer": 45.7}, "timeToAnswer") == 45
        assert int_field({"timeToAnswer": True}, "timeToAnswer") is None
        assert int_field({"timeToAnswer": -5}, "timeToAnswer") is None

    def test_new_question_id(self):
        assert new_question_id("ai", 2).startswith("ai_")
        assert new_question_id("ai", 2).endswith("_2")
        assert new_question_id("template_analysis").count("_") == 2

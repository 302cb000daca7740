"""
Tests for best-effort JSON extraction from generator output
"""

from api_recommender.llm.json_utils import extract_json_block, parse_json_object, pretty_json, strip_code_fences


class TestParseJsonObject:

    def test_plain_json(self):
        assert parse_json_object('{"api_index": 2}') == {"api_index": 2}

    def test_fenced_json(self):
        text = 'Here you go:\n```json\n{"api_index": 1}\n```\nAnything else?'
        assert parse_json_object(text) == {"api_index": 1}

    def test_json_inside_prose(self):
        text = 'Sure! The answer is {"is_relevant": true, "is_creation_request": false} as requested.'
        assert parse_json_object(text) == {"is_relevant": True, "is_creation_request": False}

    def test_garbage_returns_none(self):
        assert parse_json_object("I cannot help with that") is None
        assert parse_json_object("") is None
        assert parse_json_object(None) is None

    def test_non_object_json_returns_none(self):
        assert parse_json_object("[1, 2, 3]") is None


class TestHelpers:

    def test_extract_json_block_spans_first_to_last_brace(self):
        assert extract_json_block('x {"a": {"b": 1}} y') == '{"a": {"b": 1}}'
        assert extract_json_block("no braces") == "no braces"

    def test_strip_code_fences(self):
        assert strip_code_fences("```xml\n<a>1</a>\n```") == "<a>1</a>"
        assert strip_code_fences("  plain  ") == "plain"

    def test_pretty_json(self):
        assert pretty_json('{"a":1}') == '{\n  "a": 1\n}'
        assert pretty_json("<a/>") is None

"""
Unit Tests for Agent Utilities
==============================
"""

from agents.core.agent_utils import (
    extract_json_from_response,
    get_node_text,
    preview,
    strip_code_fences,
)


class TestStripCodeFences:
    """Test suite for strip_code_fences()."""

    def test_removes_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_fences_inside_prose(self):
        text = 'Here you go:\n```\n[1, 2]\n```\nEnjoy!'
        assert '```' not in strip_code_fences(text)
        assert '[1, 2]' in strip_code_fences(text)


class TestExtractJson:
    """Test suite for extract_json_from_response()."""

    def test_object_with_surrounding_prose(self):
        text = 'Sure! Here is the map: {"centerTopic": "X", "branches": []} Hope it helps.'
        assert extract_json_from_response(text) == {"centerTopic": "X", "branches": []}

    def test_array(self):
        assert extract_json_from_response('Notes: [{"text": "A"}]', expect='array') == [{"text": "A"}]

    def test_trailing_commas_repaired(self):
        assert extract_json_from_response('{"a": [1, 2,],}') == {"a": [1, 2]}

    def test_control_characters_repaired(self):
        assert extract_json_from_response('{"a": "b\x07"}') == {"a": "b"}

    def test_no_json_returns_none(self):
        assert extract_json_from_response("I cannot help with that.") is None

    def test_unrepairable_returns_none(self):
        assert extract_json_from_response('{"a": [1, 2}') is None

    def test_empty_and_none(self):
        assert extract_json_from_response("") is None
        assert extract_json_from_response(None) is None

    def test_never_raises_on_odd_input(self):
        for text in ["{", "}", "{}}", "[{]", "```", "{'single': 'quotes'}"]:
            extract_json_from_response(text)


class TestNodeText:
    """Test suite for get_node_text()."""

    def test_text_then_label(self):
        assert get_node_text({"text": "A", "label": "B"}) == "A"
        assert get_node_text({"label": "B"}) == "B"

    def test_bare_string(self):
        assert get_node_text("Leaf") == "Leaf"

    def test_default_for_non_string(self):
        assert get_node_text({"text": 42}, "none") == "none"
        assert get_node_text(None, "none") == "none"


def test_preview_truncates():
    assert preview("x" * 600) == "x" * 500 + "..."
    assert preview("short") == "short"

"""
Unit Tests for the Prompt Builder
=================================
"""

import pytest

from models.common import DiagramKind
from models.requests import GenerationContext
from prompts import (
    build_flow_diagram_prompt,
    build_mind_map_prompt,
    build_prompt,
    build_sticky_notes_prompt,
    format_context,
    get_available_diagram_types,
    get_prompt,
)


class TestBuildPrompt:
    """Test suite for the per-kind prompt builders."""

    def test_mind_map_prompt(self):
        prompt = build_mind_map_prompt("télétravail")
        assert '"télétravail"' in prompt
        assert '"centerTopic"' in prompt
        assert '"branches"' in prompt
        assert '"children"' in prompt
        assert "4-6 main branches" in prompt
        assert prompt.endswith("Return ONLY the JSON, no other text")

    def test_sticky_notes_prompt_embeds_count(self):
        prompt = build_sticky_notes_prompt("risques", count=7)
        assert "Generate 7 sticky notes" in prompt
        assert "exactly 7" in prompt
        assert "max 100 characters" in prompt
        assert prompt.endswith("Return ONLY the JSON array, no other text")

    def test_flow_prompt_lists_node_types(self):
        prompt = build_flow_diagram_prompt("onboarding")
        for node_type in ("start", "end", "process", "decision"):
            assert f'"{node_type}"' in prompt
        assert '"connections"' in prompt
        assert '"from"' in prompt and '"to"' in prompt

    def test_palette_listed(self):
        prompt = build_mind_map_prompt("x")
        assert "yellow, blue, green, orange, red, violet" in prompt

    def test_language_name(self):
        assert "Write all text in French" in build_mind_map_prompt("x", language="fr")
        assert "Write all text in English" in build_mind_map_prompt("x", language="en")

    def test_topic_quotes_cannot_break_prompt(self):
        prompt = build_mind_map_prompt('the "best" plan')
        assert '"the \'best\' plan"' in prompt

    def test_dispatch(self):
        assert build_prompt(DiagramKind.MIND_MAP, "x") == build_mind_map_prompt("x")
        assert build_prompt("sticky_notes", "x", count=3) == build_sticky_notes_prompt("x", 3)
        assert build_prompt("flow_diagram", "x") == build_flow_diagram_prompt("x")

    def test_sticky_notes_default_count(self):
        assert "Generate 5 sticky notes" in build_prompt("sticky_notes", "x")

    @pytest.mark.parametrize("kind", ["text", "frame", "brainstorm", "unknown"])
    def test_no_prompt_for_chat_kinds(self, kind):
        assert build_prompt(kind, "x") is None


class TestContext:
    """Test suite for context rendering."""

    def test_context_object(self):
        context = GenerationContext(profile_summary="Data analyst", job_summary="Senior BI role")
        prompt = build_mind_map_prompt("entretien", context=context)
        assert "User profile: Data analyst" in prompt
        assert "Job context: Senior BI role" in prompt

    def test_context_mapping_partial(self):
        assert format_context({"job_summary": "Nurse"}) == "Job context: Nurse\n"

    def test_no_context(self):
        assert format_context(None) == ""
        assert format_context({"profile_summary": "  "}) == ""


class TestRegistry:
    """Test suite for the prompt registry."""

    def test_falls_back_to_english_template(self):
        assert get_prompt("mind_map", "fr") == get_prompt("mind_map", "en")

    def test_unknown_kind(self):
        assert get_prompt("venn_diagram", "en") == ""

    def test_available_types(self):
        assert get_available_diagram_types() == ["flow_diagram", "mind_map", "sticky_notes"]

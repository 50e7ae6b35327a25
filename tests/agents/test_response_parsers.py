"""
Unit Tests for Response Parsers and Fallback Generators
=======================================================
"""

import json

import pytest

from agents.flow_diagrams import generate_fallback_flow_diagram, parse_flow_diagram
from agents.core.intent_classifier import classify
from agents.mind_maps import MindMapAgent, generate_fallback_mind_map, parse_mind_map
from agents.sticky_notes import generate_fallback_sticky_notes, parse_sticky_notes
from models.common import ColorTag, FlowNodeType
from models.diagrams import Branch, Leaf, MindMapStructure


class TestParseMindMap:
    """Test suite for parse_mind_map()."""

    def test_fenced_round_trip(self):
        structure = MindMapStructure(
            center_topic="Télétravail",
            branches=[
                Branch(text="Avantages", color=ColorTag.GREEN, children=[Leaf(text="Flexibilité")]),
                Branch(text="Risques", color=ColorTag.RED, children=[]),
            ],
        )
        payload = json.dumps(structure.model_dump(mode="json", by_alias=True), ensure_ascii=False)
        response = f"Voici la carte :\n```json\n{payload}\n```\nBonne séance !"

        assert parse_mind_map(response) == structure

    def test_children_as_strings_and_label_alias(self):
        response = json.dumps({
            "centerTopic": "Budget",
            "branches": [{"label": "Dépenses", "color": "purple", "children": ["Loyer", {"label": "Courses"}]}],
        })
        parsed = parse_mind_map(response)
        branch = parsed.branches[0]
        assert branch.text == "Dépenses"
        assert branch.color == ColorTag.VIOLET
        assert [child.text for child in branch.children] == ["Loyer", "Courses"]

    def test_branches_without_text_dropped(self):
        response = json.dumps({
            "centerTopic": "X",
            "branches": [{"color": "blue"}, {"text": "Kept"}, "not a branch"],
        })
        parsed = parse_mind_map(response)
        assert [branch.text for branch in parsed.branches] == ["Kept"]
        assert parsed.branches[0].color == ColorTag.BLUE

    def test_unknown_color_defaults(self):
        parsed = parse_mind_map('{"centerTopic": "X", "branches": [{"text": "A", "color": "magenta"}]}')
        assert parsed.branches[0].color == ColorTag.BLUE

    @pytest.mark.parametrize("response", [
        '{"branches": [{"text": "A"}]}',
        '{"centerTopic": "", "branches": [{"text": "A"}]}',
        '{"centerTopic": "X", "branches": "A, B"}',
        '{"centerTopic": "X", "branches": [{"color": "red"}]}',
        'I am sorry, I cannot do that.',
        '',
    ])
    def test_invalid_returns_none(self, response):
        assert parse_mind_map(response) is None

    def test_trailing_commas(self):
        parsed = parse_mind_map('{"centerTopic": "X", "branches": [{"text": "A", "children": [],},],}')
        assert parsed.center_topic == "X"


class TestParseStickyNotes:
    """Test suite for parse_sticky_notes()."""

    def test_partial_validity(self):
        notes = parse_sticky_notes('[{"text":"A","color":"yellow"},{"bad":1}]')
        assert len(notes) == 1
        assert notes[0].text == "A"
        assert notes[0].color == ColorTag.YELLOW

    def test_color_required(self):
        notes = parse_sticky_notes('[{"text":"A"},{"text":"B","color":"green"}]')
        assert [note.text for note in notes] == ["B"]

    def test_color_normalized(self):
        notes = parse_sticky_notes('```json\n[{"text":"A","color":"Light Blue"},{"text":"B","color":"pink"}]\n```')
        assert notes[0].color == ColorTag.LIGHT_BLUE
        assert notes[1].color == ColorTag.YELLOW

    @pytest.mark.parametrize("response", [
        '[{"bad": 1}]',
        '[]',
        '{"text": "A", "color": "yellow"}',
        'no notes today',
    ])
    def test_nothing_usable_returns_none(self, response):
        assert parse_sticky_notes(response) is None


class TestParseFlowDiagram:
    """Test suite for parse_flow_diagram()."""

    def test_valid_flow(self):
        response = json.dumps({
            "nodes": [
                {"id": "start", "text": "Start", "type": "start"},
                {"id": "check", "text": "OK?", "type": "decision"},
                {"id": "end", "text": "End", "type": "end"},
            ],
            "connections": [
                {"from": "start", "to": "check"},
                {"from": "check", "to": "end", "label": "Yes"},
            ],
        })
        parsed = parse_flow_diagram(response)
        assert parsed.node_ids() == ["start", "check", "end"]
        assert parsed.nodes[1].type == FlowNodeType.DECISION
        assert parsed.connections[1].source == "check"
        assert parsed.connections[1].label == "Yes"

    def test_unknown_type_and_duplicates(self):
        response = json.dumps({
            "nodes": [
                {"id": "a", "text": "First", "type": "subroutine"},
                {"id": "a", "text": "Duplicate"},
                {"id": 3, "text": "Numeric id"},
                {"id": "b", "label": "Label alias"},
            ],
            "connections": [{"from": "a", "to": "b"}, {"from": "a"}, {"to": "b"}],
        })
        parsed = parse_flow_diagram(response)
        assert parsed.node_ids() == ["a", "b"]
        assert parsed.nodes[0].text == "First"
        assert parsed.nodes[0].type == FlowNodeType.PROCESS
        assert parsed.nodes[1].text == "Label alias"
        assert len(parsed.connections) == 1

    def test_dangling_connections_kept_for_materializer(self):
        response = '{"nodes": [{"id": "a", "text": "A"}], "connections": [{"from": "a", "to": "ghost"}]}'
        parsed = parse_flow_diagram(response)
        assert parsed.connections[0].target == "ghost"

    @pytest.mark.parametrize("response", [
        '{"nodes": [{"id": "a", "text": "A"}]}',
        '{"nodes": [], "connections": []}',
        '{"nodes": [{"id": "a", "text": "A"}], "connections": [',
        'Here is your flow: start -> end',
    ])
    def test_malformed_returns_none(self, response):
        assert parse_flow_diagram(response) is None


class TestDeeplyNestedInput:
    """Nesting beyond the decoder's recursion limit is treated as unusable."""

    DEPTH = 100000

    def test_mind_map(self):
        response = '{"centerTopic": "x", "branches": ' + '[' * self.DEPTH + ']' * self.DEPTH + '}'
        assert parse_mind_map(response) is None

    def test_sticky_notes(self):
        assert parse_sticky_notes('[' * self.DEPTH + ']' * self.DEPTH) is None

    def test_flow_diagram(self):
        response = '{"nodes": ' + '[' * self.DEPTH + ']' * self.DEPTH + ', "connections": []}'
        assert parse_flow_diagram(response) is None

    def test_agent_falls_back(self):
        intent = classify("crée une mind map sur le budget")
        response = '{"a":' + '[' * self.DEPTH + ']' * self.DEPTH + '}'
        build = MindMapAgent().build_diagram(response, intent)
        assert build.used_fallback is True
        assert build.structure.center_topic == "budget"


class TestFallbacks:
    """Test suite for the fallback generators."""

    def test_mind_map_shape(self):
        structure = generate_fallback_mind_map("Préparer un entretien")
        assert structure.center_topic == "Préparer un entretien"
        assert [branch.color for branch in structure.branches] == [
            ColorTag.BLUE, ColorTag.GREEN, ColorTag.ORANGE, ColorTag.VIOLET,
        ]
        assert [len(branch.children) for branch in structure.branches] == [2, 2, 1, 1]
        assert structure.branches[0].text == "Points clés"

    def test_mind_map_center_truncated(self):
        topic = "Une très longue description du sujet à traiter"
        structure = generate_fallback_mind_map(topic)
        assert len(structure.center_topic) == 30
        assert structure.center_topic == topic[:27] + "..."

    def test_mind_map_english(self):
        assert generate_fallback_mind_map("Remote work", "en").branches[0].text == "Key points"

    def test_sticky_notes_count_and_cycle(self):
        notes = generate_fallback_sticky_notes("budget", 8)
        assert len(notes) == 8
        assert notes[0].color == ColorTag.YELLOW
        assert notes[6].color == notes[0].color
        assert notes[6].text == notes[0].text
        assert "budget" in notes[0].text

    def test_sticky_notes_text_limit(self):
        notes = generate_fallback_sticky_notes("x" * 200, 3)
        assert all(len(note.text) <= 100 for note in notes)

    def test_sticky_notes_zero(self):
        assert generate_fallback_sticky_notes("x", 0) == []

    def test_flow_ids_resolve(self):
        structure = generate_fallback_flow_diagram("recrutement")
        ids = set(structure.node_ids())
        assert structure.node_ids() == ["start", "step1", "decision", "step2", "step3", "end"]
        assert all(c.source in ids and c.target in ids for c in structure.connections)
        assert [c.label for c in structure.connections if c.label] == ["Non", "Oui"]

    def test_flow_english_labels(self):
        structure = generate_fallback_flow_diagram("hiring", "en")
        assert [c.label for c in structure.connections if c.label] == ["No", "Yes"]

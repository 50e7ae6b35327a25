"""
Integration Tests for the Whiteboard Workflow
=============================================

Runs classify -> prompt -> completion -> parse/fallback -> layout ->
materialize with stub completion services.
"""

import json

import pytest

from agents import get_agent, get_available_diagram_types
from agents.core.intent_classifier import classify
from agents.core.layout import FLOW_NODE_HEIGHT, FLOW_NODE_WIDTH
from agents.flow_diagrams import FlowDiagramAgent
from agents.main_agent import agent_whiteboard_workflow, validate_inputs
from models.common import DiagramKind, PrimitiveKind
from models.diagrams import Position
from models.requests import GenerationContext
from services.error_handler import LLMAccessDeniedError, LLMServiceError, LLMTimeoutError


class StubCompletion:
    """Completion service returning a canned response and recording prompts."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    async def __call__(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


MIND_MAP_RESPONSE = json.dumps({
    "centerTopic": "Télétravail",
    "branches": [
        {"text": "Avantages", "color": "green", "children": [{"text": "Flexibilité"}, {"text": "Moins de trajets"}]},
        {"text": "Défis", "color": "red", "children": [{"text": "Isolement"}]},
        {"text": "Outils", "color": "blue", "children": []},
    ],
}, ensure_ascii=False)


class TestWorkflow:
    """Test suite for agent_whiteboard_workflow()."""

    @pytest.mark.asyncio
    async def test_flow_request_with_prose_completion_falls_back(self):
        completion = StubCompletion("Bien sûr ! Voici les étapes : d'abord on analyse, ensuite on décide.")
        result = await agent_whiteboard_workflow(
            "crée un flow diagram pour le processus d'embauche", completion, language="fr",
        )

        assert result["success"] is True
        assert result["diagram_type"] == "flow_diagram"
        assert result["used_fallback"] is True
        diagram = result["diagram"]
        assert diagram.frame.kind == PrimitiveKind.FRAME
        assert len(diagram.primitives) >= 4
        assert len(diagram.edges) >= 3
        assert set(diagram.viewport_fit_ids) == {p.id for p in diagram.all_primitives()}
        assert len(completion.prompts) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", ["", "  \n "])
    async def test_empty_completion_falls_back(self, response):
        completion = StubCompletion(response)
        result = await agent_whiteboard_workflow("crée une mind map sur le budget", completion, language="fr")

        assert result["success"] is True
        assert result["used_fallback"] is True
        assert result["error"] is None
        assert result["diagram"].get("mind_map/center").text == "🎯 budget"

    @pytest.mark.asyncio
    async def test_mind_map_from_completion(self):
        completion = StubCompletion(f"```json\n{MIND_MAP_RESPONSE}\n```")
        result = await agent_whiteboard_workflow(
            "crée une mind map sur le télétravail", completion, anchor=Position(500, 300),
        )

        assert result["success"] is True
        assert result["used_fallback"] is False
        assert result["topic"] == "télétravail"
        assert result["confidence"] == 0.9
        diagram = result["diagram"]
        assert len(diagram.primitives) == 1 + 3 + 3
        center = diagram.get("mind_map/center")
        assert center.x + center.width / 2 == pytest.approx(500)
        assert center.y + center.height / 2 == pytest.approx(300)
        assert '"télétravail"' in completion.prompts[0]

    @pytest.mark.asyncio
    async def test_sticky_notes_count_reaches_prompt(self):
        notes = json.dumps([{"text": f"Risque {i}", "color": "orange"} for i in range(8)])
        completion = StubCompletion(notes)
        result = await agent_whiteboard_workflow("ajoute 8 post-its sur les risques", completion)

        assert result["count"] == 8
        assert "Generate 8 sticky notes" in completion.prompts[0]
        assert len(result["diagram"].primitives) == 8
        assert result["diagram"].edges == []

    @pytest.mark.asyncio
    async def test_context_reaches_prompt(self):
        completion = StubCompletion(MIND_MAP_RESPONSE)
        context = GenerationContext(profile_summary="Développeur Python", job_summary="Lead technique")
        await agent_whiteboard_workflow("crée une mind map sur mon entretien", completion, context=context)
        assert "User profile: Développeur Python" in completion.prompts[0]
        assert "Job context: Lead technique" in completion.prompts[0]

    @pytest.mark.asyncio
    async def test_completion_timeout_is_retryable(self):
        completion = StubCompletion(error=LLMTimeoutError("timeout"))
        result = await agent_whiteboard_workflow("crée une mind map sur le budget", completion, language="fr")

        assert result["success"] is False
        assert result["retryable"] is True
        assert result["diagram"] is None
        assert result["error"] == "Je n'ai pas pu générer le contenu. Réessayez dans un instant."

    @pytest.mark.asyncio
    async def test_exhausted_retries_are_retryable(self):
        completion = StubCompletion(error=LLMServiceError("All 2 attempts failed"))
        result = await agent_whiteboard_workflow("create a mind map about budgets", completion, language="en")
        assert result["retryable"] is True
        assert result["error"] == "I couldn't generate the content. Please try again in a moment."

    @pytest.mark.asyncio
    async def test_access_denied_is_not_retryable(self):
        completion = StubCompletion(error=LLMAccessDeniedError("bad key", status_code=401))
        result = await agent_whiteboard_workflow("crée une mind map sur le budget", completion)
        assert result["success"] is False
        assert result["retryable"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prompt", ["écris un titre", "ajoute un cadre autour", "bonjour !"])
    async def test_chat_kinds_skip_generation(self, prompt):
        completion = StubCompletion(MIND_MAP_RESPONSE)
        result = await agent_whiteboard_workflow(prompt, completion)
        assert result["success"] is False
        assert result["handled_by_chat"] is True
        assert result["error"] is None
        assert completion.prompts == []

    @pytest.mark.asyncio
    async def test_forced_kind(self):
        completion = StubCompletion("nothing useful")
        result = await agent_whiteboard_workflow("des idées pour le budget", completion, forced_kind="sticky_notes")
        assert result["diagram_type"] == "sticky_notes"
        assert result["confidence"] == 1.0
        assert result["used_fallback"] is True
        assert len(result["diagram"].primitives) == 5

    @pytest.mark.asyncio
    async def test_unknown_forced_kind(self):
        result = await agent_whiteboard_workflow("budget", StubCompletion(), forced_kind="venn")
        assert result["success"] is False
        assert result["error_type"] == "validation"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prompt", ["", "   "])
    async def test_blank_prompt_rejected(self, prompt):
        completion = StubCompletion(MIND_MAP_RESPONSE)
        result = await agent_whiteboard_workflow(prompt, completion, language="fr")
        assert result["success"] is False
        assert result["error"] == "Le message est vide ou invalide"
        assert completion.prompts == []


class TestAgents:
    """Test suite for the agent registry and build_diagram()."""

    def test_registry(self):
        assert get_available_diagram_types() == ["mind_map", "sticky_notes", "flow_diagram"]
        assert get_agent("mind_map").diagram_type == DiagramKind.MIND_MAP
        assert get_agent("text") is None

    def test_build_diagram_never_raises_on_garbage(self):
        intent = classify("crée une mind map sur le budget")
        for raw in [None, "", "{", "[1, 2, 3]", "{\"centerTopic\": 3}"]:
            build = get_agent("mind_map").build_diagram(raw, intent)
            assert build.used_fallback is True
            assert build.diagram.primitives

    def test_layered_strategy(self):
        agent = FlowDiagramAgent(layout_strategy="layered")
        intent = classify("crée un flow diagram pour le recrutement")
        build = agent.build_diagram("no json", intent, Position(0, 0))
        step2 = build.diagram.primitives[3]
        step3 = build.diagram.primitives[4]
        assert step2.y == step3.y
        assert step2.x != step3.x

    def test_flow_nodes_use_layout_size(self):
        agent = FlowDiagramAgent(layout_strategy="sequence")
        build = agent.build_diagram("no json", classify("crée un flow diagram pour le recrutement"))
        assert {p.width for p in build.diagram.primitives} == {FLOW_NODE_WIDTH}
        assert {p.height for p in build.diagram.primitives} == {FLOW_NODE_HEIGHT}
        first, second = build.diagram.primitives[:2]
        assert second.y - first.y == FLOW_NODE_HEIGHT + 80

    def test_sequence_strategy(self):
        agent = FlowDiagramAgent(layout_strategy="sequence")
        intent = classify("crée un flow diagram pour le recrutement")
        build = agent.build_diagram("no json", intent)
        xs = {p.x for p in build.diagram.primitives}
        assert len(xs) == 1


class TestValidateInputs:
    """Test suite for validate_inputs()."""

    def test_valid(self):
        validate_inputs("crée une mind map", "fr")

    def test_too_long(self):
        with pytest.raises(ValueError):
            validate_inputs("x" * 10001, "fr")

    def test_unsupported_language(self):
        with pytest.raises(ValueError):
            validate_inputs("hello", "zh")

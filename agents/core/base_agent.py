"""
Base Agent Class for Whiteboard AI

This module provides the abstract base class that all diagram agents
inherit from, ensuring consistent interface and behavior:

    prompt -> completion -> parse (-> fallback) -> layout -> materialize
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional
import logging

from models.canvas import MaterializedDiagram
from models.common import DiagramKind
from models.diagrams import Position
from .agent_utils import preview
from .intent_classifier import Intent

logger = logging.getLogger(__name__)

# Completion service: prompt in, raw text out
CompletionFn = Callable[[str], Awaitable[str]]

ORIGIN = Position(0.0, 0.0)


@dataclass
class DiagramBuild:
    """Result of one diagram build"""
    diagram: MaterializedDiagram
    structure: Any
    used_fallback: bool = False


class BaseAgent(ABC):
    """
    Abstract base class for all whiteboard diagram agents.

    Subclasses supply the five per-kind steps; ``build_diagram`` and
    ``generate_graph`` chain them. Agents hold no per-request state and can
    be shared between concurrent requests.
    """

    diagram_type: DiagramKind = None

    def __init__(self, language: str = 'fr'):
        """
        Initialize the base agent.

        Args:
            language: Language for prompts and fallback content ('fr' or 'en')
        """
        self.language = language
        self.logger = logger

    @abstractmethod
    def build_prompt(self, intent: Intent, context: Any = None) -> str:
        """Completion prompt for the intent's topic."""

    @abstractmethod
    def parse_response(self, raw_completion: str) -> Any:
        """Typed structure from raw completion text, or None when unusable."""

    @abstractmethod
    def generate_fallback(self, intent: Intent) -> Any:
        """Deterministic offline structure for the intent's topic."""

    @abstractmethod
    def calculate_layout(self, structure: Any, anchor: Position) -> Any:
        pass

    @abstractmethod
    def materialize(self, structure: Any, layout: Any, intent: Intent) -> MaterializedDiagram:
        pass

    def build_diagram(self, raw_completion: Optional[str], intent: Intent,
                      anchor: Optional[Position] = None) -> DiagramBuild:
        """
        Turn raw completion text into canvas primitives.

        Never raises on bad completion text: anything unparseable or
        structurally invalid is replaced by the fallback structure.
        """
        anchor = anchor or ORIGIN
        structure = self.parse_response(raw_completion or '')
        used_fallback = structure is None
        if used_fallback:
            logger.warning(
                f"{self.__class__.__name__}: unusable completion, using fallback for topic "
                f"'{intent.topic}'. Response: {preview(raw_completion or '', 200)}"
            )
            structure = self.generate_fallback(intent)

        layout = self.calculate_layout(structure, anchor)
        diagram = self.materialize(structure, layout, intent)
        logger.info(
            f"{self.__class__.__name__}: built {len(diagram.primitives)} nodes, "
            f"{len(diagram.edges)} connectors (fallback={used_fallback})"
        )
        return DiagramBuild(diagram=diagram, structure=structure, used_fallback=used_fallback)

    async def generate_graph(self, intent: Intent, completion: CompletionFn, context: Any = None,
                             anchor: Optional[Position] = None) -> DiagramBuild:
        """
        Build the prompt, await one completion and build the diagram.

        Errors raised by ``completion`` propagate to the caller.
        """
        prompt = self.build_prompt(intent, context)
        logger.debug(f"{self.__class__.__name__}: prompt length {len(prompt)}")
        raw_completion = await completion(prompt)
        return self.build_diagram(raw_completion, intent, anchor)

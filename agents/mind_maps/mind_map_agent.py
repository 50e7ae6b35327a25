"""
Mind Map Agent

Parses mind map completions, falls back to a fixed four-branch map when the
completion is unusable, lays the map out as a radial tree and materializes it.
"""

import logging
from typing import Any, List, Optional

from models.canvas import MaterializedDiagram
from models.common import ColorTag, DiagramKind
from models.diagrams import Branch, Leaf, MindMapStructure, Position
from prompts import build_mind_map_prompt
from ..core.agent_utils import extract_json_from_response, get_node_text, preview
from ..core.base_agent import BaseAgent
from ..core.intent_classifier import Intent
from ..core.layout import MindMapLayout, calculate_mind_map_layout
from ..core.materializer import materialize_mind_map

logger = logging.getLogger(__name__)

MAX_CENTER_TOPIC_LENGTH = 30

_FALLBACK_TEXT = {
    'fr': {
        'key_points': 'Points clés',
        'aspect': 'Aspect {n} de {topic}',
        'actions': 'Actions à faire',
        'research': "Rechercher plus d'infos",
        'documents': 'Préparer les documents',
        'questions': 'Questions',
        'clarify': 'Points à clarifier',
        'resources': 'Ressources',
        'useful_docs': 'Documents utiles',
    },
    'en': {
        'key_points': 'Key points',
        'aspect': 'Aspect {n} of {topic}',
        'actions': 'Actions',
        'research': 'Research more information',
        'documents': 'Prepare the documents',
        'questions': 'Questions',
        'clarify': 'Points to clarify',
        'resources': 'Resources',
        'useful_docs': 'Useful documents',
    },
}


def _parse_children(raw_children: Any) -> List[Leaf]:
    if not isinstance(raw_children, list):
        return []
    children = []
    for child in raw_children:
        text = get_node_text(child)
        if text:
            children.append(Leaf(text=text))
        else:
            logger.debug(f"Dropping mind map child without text: {preview(child, 80)}")
    return children


def parse_mind_map(response: Optional[str]) -> Optional[MindMapStructure]:
    """
    Parse a mind map completion.

    Requires a non-empty string ``centerTopic`` and a ``branches`` array.
    Branches without text are dropped; children may be objects or bare
    strings. Returns None when nothing usable remains. Never raises.
    """
    parsed = extract_json_from_response(response, expect='object')
    if not isinstance(parsed, dict):
        return None

    center_topic = parsed.get('centerTopic')
    raw_branches = parsed.get('branches')
    if not isinstance(center_topic, str) or not center_topic.strip() or not isinstance(raw_branches, list):
        logger.error("Invalid mind map structure: missing centerTopic or branches")
        return None

    branches = []
    for raw_branch in raw_branches:
        text = get_node_text(raw_branch) if isinstance(raw_branch, dict) else ''
        if not text:
            logger.debug(f"Dropping mind map branch without text: {preview(raw_branch, 80)}")
            continue
        branches.append(Branch(
            text=text,
            color=raw_branch.get('color'),
            children=_parse_children(raw_branch.get('children')),
        ))

    if not branches:
        logger.error("Mind map has no usable branch")
        return None

    logger.info(f"Parsed mind map '{center_topic}' with {len(branches)} branches")
    return MindMapStructure(center_topic=center_topic, branches=branches)


def generate_fallback_mind_map(topic: str, language: str = 'fr') -> MindMapStructure:
    """Fixed four-branch map about ``topic``; center topic cut to 30 characters."""
    text = _FALLBACK_TEXT.get(language, _FALLBACK_TEXT['fr'])
    center = topic if len(topic) <= MAX_CENTER_TOPIC_LENGTH else topic[:MAX_CENTER_TOPIC_LENGTH - 3] + '...'
    short_topic = topic[:20]

    return MindMapStructure(
        center_topic=center or '...',
        branches=[
            Branch(text=text['key_points'], color=ColorTag.BLUE, children=[
                Leaf(text=text['aspect'].format(n=1, topic=short_topic)),
                Leaf(text=text['aspect'].format(n=2, topic=short_topic)),
            ]),
            Branch(text=text['actions'], color=ColorTag.GREEN, children=[
                Leaf(text=text['research']),
                Leaf(text=text['documents']),
            ]),
            Branch(text=text['questions'], color=ColorTag.ORANGE, children=[
                Leaf(text=text['clarify']),
            ]),
            Branch(text=text['resources'], color=ColorTag.VIOLET, children=[
                Leaf(text=text['useful_docs']),
            ]),
        ],
    )


class MindMapAgent(BaseAgent):
    """Radial mind map: center topic, colored branches, leaf children."""

    diagram_type = DiagramKind.MIND_MAP

    def __init__(self, language: str = 'fr', node_width: float = 220, node_height: float = 120):
        super().__init__(language=language)
        self.node_width = node_width
        self.node_height = node_height

    def build_prompt(self, intent: Intent, context: Any = None) -> str:
        return build_mind_map_prompt(intent.topic, context, self.language)

    def parse_response(self, raw_completion: str) -> Optional[MindMapStructure]:
        return parse_mind_map(raw_completion)

    def generate_fallback(self, intent: Intent) -> MindMapStructure:
        return generate_fallback_mind_map(intent.topic, self.language)

    def calculate_layout(self, structure: MindMapStructure, anchor: Position) -> MindMapLayout:
        return calculate_mind_map_layout(structure, anchor, self.node_width, self.node_height)

    def materialize(self, structure: MindMapStructure, layout: MindMapLayout, intent: Intent) -> MaterializedDiagram:
        return materialize_mind_map(structure, layout)

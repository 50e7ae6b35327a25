"""
Sticky Notes Agent

Parses a JSON array of post-its, falls back to templated notes, and lays the
notes out as a grid centered on the anchor.
"""

import logging
from typing import Any, List, Optional

from models.canvas import MaterializedDiagram
from models.common import DiagramKind, GENERATION_PALETTE
from models.diagrams import Position, StickyNote
from prompts import build_sticky_notes_prompt
from ..core.agent_utils import extract_json_from_response, is_text_field, preview
from ..core.base_agent import BaseAgent
from ..core.intent_classifier import DEFAULT_NOTE_COUNT, Intent
from ..core.layout import calculate_sticky_notes_layout
from ..core.materializer import materialize_sticky_notes

logger = logging.getLogger(__name__)

MAX_NOTE_LENGTH = 100

_FALLBACK_TEMPLATES = {
    'fr': [
        'Point important sur {topic}',
        'Question à explorer: {topic}',
        'Action: approfondir {topic}',
        'Idée: améliorer {topic}',
        'Note: aspects de {topic}',
        'Réflexion sur {topic}',
    ],
    'en': [
        'Key point about {topic}',
        'Question to explore: {topic}',
        'Action: dig deeper into {topic}',
        'Idea: improve {topic}',
        'Note: aspects of {topic}',
        'Thoughts on {topic}',
    ],
}


def parse_sticky_notes(response: Optional[str]) -> Optional[List[StickyNote]]:
    """
    Parse a sticky notes completion.

    Keeps array elements with a string ``text`` and a string ``color`` and
    drops the rest. Returns None when there is no array or no valid note.
    """
    parsed = extract_json_from_response(response, expect='array')
    if not isinstance(parsed, list):
        return None

    notes = []
    for item in parsed:
        if is_text_field(item, 'text') and is_text_field(item, 'color') and item['text'].strip():
            notes.append(StickyNote(text=item['text'], color=item['color']))
        else:
            logger.debug(f"Dropping invalid sticky note: {preview(item, 80)}")

    if not notes:
        logger.error("Sticky notes response has no valid note")
        return None

    logger.info(f"Parsed {len(notes)} sticky notes ({len(parsed) - len(notes)} dropped)")
    return notes


def generate_fallback_sticky_notes(topic: str, count: int = DEFAULT_NOTE_COUNT,
                                   language: str = 'fr') -> List[StickyNote]:
    """``count`` notes cycling through six templates and six colors."""
    templates = _FALLBACK_TEMPLATES.get(language, _FALLBACK_TEMPLATES['fr'])
    return [
        StickyNote(
            text=templates[i % len(templates)].format(topic=topic)[:MAX_NOTE_LENGTH],
            color=GENERATION_PALETTE[i % len(GENERATION_PALETTE)],
        )
        for i in range(max(count, 0))
    ]


class StickyNotesAgent(BaseAgent):
    """Grid of colored post-its."""

    diagram_type = DiagramKind.STICKY_NOTES

    def __init__(self, language: str = 'fr', note_size: float = 220):
        super().__init__(language=language)
        self.note_size = note_size

    def build_prompt(self, intent: Intent, context: Any = None) -> str:
        return build_sticky_notes_prompt(intent.topic, intent.count or DEFAULT_NOTE_COUNT, context, self.language)

    def parse_response(self, raw_completion: str) -> Optional[List[StickyNote]]:
        return parse_sticky_notes(raw_completion)

    def generate_fallback(self, intent: Intent) -> List[StickyNote]:
        return generate_fallback_sticky_notes(intent.topic, intent.count or DEFAULT_NOTE_COUNT, self.language)

    def calculate_layout(self, structure: List[StickyNote], anchor: Position) -> List[Position]:
        return calculate_sticky_notes_layout(len(structure), anchor, self.note_size, self.note_size)

    def materialize(self, structure: List[StickyNote], layout: List[Position], intent: Intent) -> MaterializedDiagram:
        return materialize_sticky_notes(structure, layout, title=intent.topic,
                                        note_width=self.note_size, note_height=self.note_size)

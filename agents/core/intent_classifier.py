"""
Whiteboard Intent Classifier

Rule-based dispatcher from a raw chat message to the kind of whiteboard
content the user is asking for. Keyword sets are checked in a fixed priority
order (mind map, flow diagram, sticky notes, frame, text) and the first set
with a match wins; anything else is a generic brainstorm request.

Keywords cover the French and English phrasings users actually type.
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from models.common import DiagramKind
from .agent_utils import preview

logger = logging.getLogger(__name__)


MIND_MAP_KEYWORDS = [
    'mind map', 'mindmap', 'carte mentale', 'carte heuristique',
    'brainstorm', 'arbre', 'branches', 'map des idées', 'mapping',
    'schéma', 'organigramme des idées', 'diagramme conceptuel',
]

FLOW_DIAGRAM_KEYWORDS = [
    'flow diagram', 'flow chart', 'flowchart', 'flow', 'diagramme', 'diagram',
    'processus', 'process', 'workflow', 'étapes', 'steps', 'séquence',
    'sequence', 'flux', 'parcours', 'chemin', 'pipeline',
]

STICKY_NOTE_KEYWORDS = [
    'post-it', 'postit', 'post it', 'sticky', 'note', 'pense-bête',
    'memo', 'mémo', 'idées', 'ideas',
]

FRAME_KEYWORDS = [
    'frame', 'cadre', 'groupe', 'group', 'section', 'container',
    'zone', 'area', 'encadrer', 'regrouper',
]

TEXT_KEYWORDS = [
    'ajoute du texte', 'add text', 'texte', 'text', 'titre', 'title',
    'écrire', 'écris', 'write',
]

CREATION_KEYWORDS = [
    'crée', 'créer', 'create', 'fais', 'faire', 'génère', 'générer',
    'generate', 'ajoute', 'ajouter', 'add', 'dessine', 'draw',
    'construis', 'build', 'make', 'produce', 'design',
]

# Creation verbs with their articles, then filler prepositions.
# Longer phrases come first so "crée une" is removed before "crée".
TOPIC_PREFIXES = [
    'crée une', 'créer une', 'crée un', 'créer un', 'create an', 'create a',
    'fais une', 'faire une', 'fais un', 'faire un',
    'génère une', 'générer une', 'génère un', 'générer un',
    'generate an', 'generate a', 'ajoute une', 'ajoute un', 'ajoute des',
    'add an', 'add a', 'add some', 'make an', 'make a', 'build an', 'build a',
    'draw an', 'draw a', 'dessine une', 'dessine un',
    'crée', 'créer', 'create', 'génère', 'générer', 'generate', 'ajoute',
    'ajouter', 'add', 'dessine', 'draw', 'make', 'build', 'fais', 'faire',
    'sur le thème de', 'sur le thème', 'à propos de', 'about', 'sur', 'on',
    'pour', 'for', 'concernant', 'regarding',
]

LEADING_ARTICLES = ['les', 'le', 'la', "l'", 'des', 'du', 'de', 'the', 'a', 'an']

DEFAULT_TOPIC = 'Ideas'
DEFAULT_NOTE_COUNT = 5
MIN_NOTE_COUNT = 1
MAX_NOTE_COUNT = 20

# (kind, keyword set, confidence) in priority order
_RULES: Tuple[Tuple[DiagramKind, Sequence[str], float], ...] = (
    (DiagramKind.MIND_MAP, MIND_MAP_KEYWORDS, 0.9),
    (DiagramKind.FLOW_DIAGRAM, FLOW_DIAGRAM_KEYWORDS, 0.85),
    (DiagramKind.STICKY_NOTES, STICKY_NOTE_KEYWORDS, 0.85),
    (DiagramKind.FRAME, FRAME_KEYWORDS, 0.8),
    (DiagramKind.TEXT, TEXT_KEYWORDS, 0.75),
)

_ALL_CONTENT_KEYWORDS = [kw for _, keywords, _ in _RULES for kw in keywords]


@dataclass(frozen=True)
class Intent:
    """Classified whiteboard request"""
    kind: DiagramKind
    confidence: float
    topic: str
    raw_text: str
    count: Optional[int] = None


def _keyword_pattern(keyword: str) -> str:
    # Anchored at a word start; trailing letters allowed so plurals match
    return r'(?<!\w)' + re.escape(keyword)


def _matching_keywords(text: str, keywords: Sequence[str]) -> List[str]:
    lowered = text.lower()
    return [kw for kw in keywords if re.search(_keyword_pattern(kw), lowered)]


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return bool(_matching_keywords(text, keywords))


def extract_count(text: str) -> int:
    """First integer in the text clamped to [1, 20]; 5 when there is none."""
    match = re.search(r'\d+', text)
    if not match:
        return DEFAULT_NOTE_COUNT
    return min(max(int(match.group(0)), MIN_NOTE_COUNT), MAX_NOTE_COUNT)


def extract_topic(text: str, matched_keywords: Sequence[str] = (), strip_count: bool = False) -> str:
    """
    Reduce a request to its subject.

    Removes creation verbs and filler prepositions, every occurrence of each
    matched content keyword (with any plural suffix), the count when asked,
    and leading articles. Falls back to "Ideas" when nothing is left.
    """
    if isinstance(matched_keywords, str):
        matched_keywords = [matched_keywords]

    topic = text
    for prefix in TOPIC_PREFIXES:
        topic = re.sub(r'(?<!\w)' + re.escape(prefix) + r'(?!\w)\s*', ' ', topic, flags=re.IGNORECASE)

    # Longest first so "flow diagram" goes before "flow"
    for keyword in sorted(matched_keywords, key=len, reverse=True):
        topic = re.sub(_keyword_pattern(keyword) + r'\w*\s*', ' ', topic, flags=re.IGNORECASE)

    if strip_count:
        topic = re.sub(r'\d+', ' ', topic, count=1)

    topic = re.sub(r'\s+', ' ', topic).strip(" \t\n:,.;!?-")

    changed = True
    while changed and topic:
        changed = False
        for article in LEADING_ARTICLES:
            pattern = r'^' + re.escape(article) + (r'' if article.endswith("'") else r'(?!\w)') + r'\s*'
            stripped = re.sub(pattern, '', topic, flags=re.IGNORECASE)
            if stripped != topic:
                topic = stripped.strip()
                changed = True
                break

    return topic or DEFAULT_TOPIC


def classify(text: str) -> Intent:
    """
    Classify a chat message into a whiteboard intent.

    Total: every input, including empty strings, yields an Intent with a
    non-empty topic.
    """
    raw_text = text if isinstance(text, str) else ''

    for kind, keywords, confidence in _RULES:
        matched = _matching_keywords(raw_text, keywords)
        if not matched:
            continue
        keyword = max(matched, key=len)
        is_notes = kind == DiagramKind.STICKY_NOTES
        intent = Intent(
            kind=kind,
            confidence=confidence,
            topic=extract_topic(raw_text, matched, strip_count=is_notes),
            raw_text=raw_text,
            count=extract_count(raw_text) if is_notes else None,
        )
        logger.debug(f"Intent: '{preview(raw_text, 80)}' -> {kind.value} (keyword '{keyword}', topic '{intent.topic}')")
        return intent

    logger.debug(f"Intent: '{preview(raw_text, 80)}' -> brainstorm (no keyword)")
    return Intent(
        kind=DiagramKind.BRAINSTORM,
        confidence=0.5,
        topic=raw_text.strip() or DEFAULT_TOPIC,
        raw_text=raw_text,
    )


def is_creation_request(text: str) -> bool:
    """True when the message has a creation verb and a content-kind keyword."""
    if not isinstance(text, str) or not text:
        return False
    return _contains_any(text, CREATION_KEYWORDS) and _contains_any(text, _ALL_CONTENT_KEYWORDS)

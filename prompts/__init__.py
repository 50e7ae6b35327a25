"""
Centralized Prompt Registry for Whiteboard AI

This module provides a unified interface for the generation prompts,
organized by diagram kind and language, and the builders that fill them in.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from models.common import DiagramKind, GENERATION_PALETTE
from .whiteboard import WHITEBOARD_PROMPTS

logger = logging.getLogger(__name__)

# Unified prompt registry
PROMPT_REGISTRY = {
    **WHITEBOARD_PROMPTS,
}

LANGUAGE_NAMES = {
    'fr': 'French',
    'en': 'English',
}


def get_prompt(diagram_type: str, language: str = 'en', prompt_type: str = 'generation') -> str:
    """
    Get a prompt template for a diagram kind and language.

    Args:
        diagram_type: Kind of diagram (e.g., 'mind_map', 'sticky_notes')
        language: Language code ('en' or 'fr'); falls back to English
        prompt_type: Type of prompt ('generation')

    Returns:
        str: The prompt template, or "" if none is registered
    """
    key = f"{diagram_type}_{prompt_type}_{language}"
    if key in PROMPT_REGISTRY:
        return PROMPT_REGISTRY[key]
    return PROMPT_REGISTRY.get(f"{diagram_type}_{prompt_type}_en", "")


def get_available_diagram_types() -> list:
    """Diagram kinds that have at least one generation prompt."""
    return sorted(
        kind.value for kind in DiagramKind
        if any(key.startswith(f"{kind.value}_") for key in PROMPT_REGISTRY)
    )


def format_context(context: Optional[Union[Mapping[str, Any], Any]]) -> str:
    """
    Render optional caller facts as prompt lines.

    Accepts a GenerationContext-like object or a mapping with
    ``profile_summary`` and ``job_summary``. Both are opaque text.
    """
    if context is None:
        return ""
    if isinstance(context, Mapping):
        profile = context.get('profile_summary')
        job = context.get('job_summary')
    else:
        profile = getattr(context, 'profile_summary', None)
        job = getattr(context, 'job_summary', None)

    lines = []
    if profile and str(profile).strip():
        lines.append(f"User profile: {str(profile).strip()}")
    if job and str(job).strip():
        lines.append(f"Job context: {str(job).strip()}")
    return "\n".join(lines) + "\n" if lines else ""


def _fill(kind: DiagramKind, topic: str, context: Any, language: str, **extra) -> str:
    template = get_prompt(kind.value, language)
    return template.format(
        topic=topic.replace('"', "'"),
        context=format_context(context),
        palette=", ".join(color.value for color in GENERATION_PALETTE),
        language_name=LANGUAGE_NAMES.get(language, 'English'),
        **extra,
    )


def build_mind_map_prompt(topic: str, context: Any = None, language: str = 'en') -> str:
    return _fill(DiagramKind.MIND_MAP, topic, context, language)


def build_sticky_notes_prompt(topic: str, count: int = 5, context: Any = None, language: str = 'en') -> str:
    return _fill(DiagramKind.STICKY_NOTES, topic, context, language, count=count)


def build_flow_diagram_prompt(topic: str, context: Any = None, language: str = 'en') -> str:
    return _fill(DiagramKind.FLOW_DIAGRAM, topic, context, language)


def build_prompt(
    kind: Union[DiagramKind, str],
    topic: str,
    count: Optional[int] = None,
    context: Any = None,
    language: str = 'en',
) -> Optional[str]:
    """
    Build the completion prompt for a diagram kind.

    Returns None for text, frame and brainstorm requests, which the chat
    flow answers without structured generation.
    """
    try:
        kind = DiagramKind(kind)
    except ValueError:
        logger.warning(f"No prompt for unknown diagram kind: {kind}")
        return None

    if kind == DiagramKind.MIND_MAP:
        return build_mind_map_prompt(topic, context, language)
    if kind == DiagramKind.STICKY_NOTES:
        return build_sticky_notes_prompt(topic, count or 5, context, language)
    if kind == DiagramKind.FLOW_DIAGRAM:
        return build_flow_diagram_prompt(topic, context, language)
    return None


__all__ = [
    'PROMPT_REGISTRY',
    'get_prompt',
    'get_available_diagram_types',
    'format_context',
    'build_prompt',
    'build_mind_map_prompt',
    'build_sticky_notes_prompt',
    'build_flow_diagram_prompt',
]

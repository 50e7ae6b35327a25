"""
Whiteboard AI Agents Package

Central registry for all diagram generation agents.
"""

from .mind_maps import MindMapAgent
from .sticky_notes import StickyNotesAgent
from .flow_diagrams import FlowDiagramAgent

# Agent Registry - Maps diagram kinds to their agent classes
AGENT_REGISTRY = {
    'mind_map': MindMapAgent,
    'sticky_notes': StickyNotesAgent,
    'flow_diagram': FlowDiagramAgent,
}


def get_agent(diagram_type: str, language: str = 'fr'):
    """
    Get an agent instance for the specified diagram kind.

    Args:
        diagram_type: Kind of diagram to generate
        language: Language for prompts and fallback content

    Returns:
        Agent instance or None if not found
    """
    agent_class = AGENT_REGISTRY.get(diagram_type)
    if agent_class:
        return agent_class(language=language)
    return None


def get_available_diagram_types():
    """
    Get list of all available diagram kinds.

    Returns:
        List of diagram kind strings
    """
    return list(AGENT_REGISTRY.keys())


__all__ = [
    'MindMapAgent',
    'StickyNotesAgent',
    'FlowDiagramAgent',
    'AGENT_REGISTRY',
    'get_agent',
    'get_available_diagram_types'
]

"""
Sticky Notes Module for Whiteboard AI

This module contains the agent for generating grids of post-its
about a topic.
"""

from .sticky_notes_agent import (
    StickyNotesAgent,
    generate_fallback_sticky_notes,
    parse_sticky_notes,
)

__all__ = ['StickyNotesAgent', 'parse_sticky_notes', 'generate_fallback_sticky_notes']

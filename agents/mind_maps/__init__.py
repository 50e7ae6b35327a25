"""
Mind Maps Module for Whiteboard AI

This module contains the agent for generating mind maps,
which organize ideas around a central topic.
"""

from .mind_map_agent import MindMapAgent, generate_fallback_mind_map, parse_mind_map

__all__ = ['MindMapAgent', 'parse_mind_map', 'generate_fallback_mind_map']

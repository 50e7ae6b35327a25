"""
Flow Diagrams Module for Whiteboard AI

This module contains the agent for generating process flows
made of start, process, decision and end steps.
"""

from .flow_diagram_agent import (
    FlowDiagramAgent,
    generate_fallback_flow_diagram,
    parse_flow_diagram,
)

__all__ = ['FlowDiagramAgent', 'parse_flow_diagram', 'generate_fallback_flow_diagram']

"""
Internal Services Package

This package contains internal services:
- Error Handler: completion error taxonomy, retry and timeout helpers
- Canvas Service: applies materialized diagrams to a canvas collaborator
"""

from . import error_handler
from .canvas_service import CanvasCollaborator, InMemoryCanvas, apply_to_canvas

__all__ = [
    'error_handler',
    'CanvasCollaborator',
    'InMemoryCanvas',
    'apply_to_canvas',
]

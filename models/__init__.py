"""
Whiteboard AI Pydantic Models
=============================

Diagram structures, canvas primitives, and request and response models
for FastAPI type safety and validation.
"""

from .requests import (
    AnchorPoint,
    GenerationContext,
    IntentRequest,
    WhiteboardGenerateRequest,
)

from .responses import (
    ErrorResponse,
    HealthResponse,
    IntentResponse,
    WhiteboardGenerateResponse,
)

from .common import ColorTag, DiagramKind, FlowNodeType, Language, PrimitiveKind
from .diagrams import (
    Branch,
    FlowConnection,
    FlowDiagramStructure,
    FlowNode,
    Leaf,
    MindMapStructure,
    Position,
    StickyNote,
)
from .canvas import CanvasPrimitive, MaterializedDiagram
from .messages import Messages, get_request_language

__all__ = [
    # Requests
    "AnchorPoint",
    "GenerationContext",
    "IntentRequest",
    "WhiteboardGenerateRequest",
    # Responses
    "ErrorResponse",
    "HealthResponse",
    "IntentResponse",
    "WhiteboardGenerateResponse",
    # Enums
    "ColorTag",
    "DiagramKind",
    "FlowNodeType",
    "Language",
    "PrimitiveKind",
    # Diagram structures
    "Branch",
    "FlowConnection",
    "FlowDiagramStructure",
    "FlowNode",
    "Leaf",
    "MindMapStructure",
    "Position",
    "StickyNote",
    # Canvas
    "CanvasPrimitive",
    "MaterializedDiagram",
    # Messages
    "Messages",
    "get_request_language",
]

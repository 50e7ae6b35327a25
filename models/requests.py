"""
Request Models
==============

Pydantic models for validating API request payloads.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import DiagramKind, Language
from .diagrams import Position


class GenerationContext(BaseModel):
    """Optional facts about the user, passed to the prompt as opaque text"""
    profile_summary: Optional[str] = Field(None, max_length=2000, description="Short summary of the user's profile")
    job_summary: Optional[str] = Field(None, max_length=2000, description="Short summary of the job being prepared")


class AnchorPoint(BaseModel):
    """Canvas point the diagram is centered on, usually the viewport center"""
    x: float = 0.0
    y: float = 0.0

    def to_position(self) -> Position:
        return Position(self.x, self.y)


class IntentRequest(BaseModel):
    """Request model for /api/whiteboard/intent"""
    prompt: str = Field(..., max_length=10000, description="User chat message")


class WhiteboardGenerateRequest(BaseModel):
    """Request model for /api/whiteboard/generate"""
    prompt: str = Field(..., max_length=10000, description="User chat message")
    language: Language = Field(Language.FR, description="Language for generated content and messages")
    context: Optional[GenerationContext] = Field(None, description="Optional user/job context")
    anchor: Optional[AnchorPoint] = Field(None, description="Canvas point to center the diagram on")
    diagram_type: Optional[DiagramKind] = Field(None, description="Diagram kind (classified from the prompt if not provided)")

    @field_validator('diagram_type', mode='before')
    @classmethod
    def normalize_diagram_type(cls, v):
        """Normalize diagram kind aliases (e.g., 'mindmap' -> 'mind_map')"""
        if v is None:
            return v

        v_str = v.value if hasattr(v, 'value') else str(v)
        aliases = {
            'mindmap': 'mind_map',
            'sticky_note': 'sticky_notes',
            'postits': 'sticky_notes',
            'flowchart': 'flow_diagram',
            'flow': 'flow_diagram',
        }
        return aliases.get(v_str.lower(), v_str)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "prompt": "crée une mind map sur le télétravail",
            "language": "fr",
            "anchor": {"x": 640, "y": 360},
        }
    })

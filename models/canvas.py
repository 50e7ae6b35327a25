"""
Canvas Primitive Models
=======================

Drawable primitives handed to the canvas collaborator, plus the
grouping and viewport instructions that accompany one generated diagram.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from .common import ColorTag, DiagramKind, PrimitiveKind
from .diagrams import Position


class CanvasPrimitive(BaseModel):
    """
    One shape request.

    ``x``/``y`` is the top-left corner for notes, frames and text, and the
    start point for arrows. Arrows also carry absolute ``start``/``end``
    points and the ids of the shapes they connect.
    """
    id: str
    kind: PrimitiveKind
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    color: Optional[ColorTag] = None
    text: str = ""
    size: str = "m"
    start: Optional[Position] = None
    end: Optional[Position] = None
    source_id: Optional[str] = None
    target_id: Optional[str] = None


class MaterializedDiagram(BaseModel):
    """Everything the canvas needs to draw, group and frame one diagram"""
    kind: DiagramKind
    frame: CanvasPrimitive
    primitives: List[CanvasPrimitive] = Field(default_factory=list, description="Content nodes")
    edges: List[CanvasPrimitive] = Field(default_factory=list, description="Connectors")
    labels: List[CanvasPrimitive] = Field(default_factory=list, description="Connector labels")
    containment_ids: List[str] = Field(default_factory=list, description="Ids to group under the frame")
    viewport_fit_ids: List[str] = Field(default_factory=list, description="Ids to fit the viewport to")

    def all_primitives(self) -> List[CanvasPrimitive]:
        """Frame first, then nodes, connectors and labels in emission order."""
        return [self.frame, *self.primitives, *self.edges, *self.labels]

    def get(self, primitive_id: str) -> Optional[CanvasPrimitive]:
        for primitive in self.all_primitives():
            if primitive.id == primitive_id:
                return primitive
        return None

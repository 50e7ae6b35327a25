"""
Canvas Service
==============

Bridge between a materialized diagram and the canvas that draws it.

The canvas is reached through the ``CanvasCollaborator`` interface: create
shapes, group shapes under a frame, fit the viewport. ``apply_to_canvas``
drives one diagram through it; frame containment is best-effort and a
refusal leaves the diagram drawn but ungrouped.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from models.canvas import CanvasPrimitive, MaterializedDiagram

logger = logging.getLogger(__name__)


class CanvasError(Exception):
    """Raised by a canvas collaborator that cannot perform an operation."""
    pass


class CanvasCollaborator(ABC):
    """Operations the whiteboard needs from a canvas implementation."""

    @abstractmethod
    def create_shapes(self, primitives: Sequence[CanvasPrimitive]) -> Dict[str, str]:
        """Create shapes in order; returns local primitive id -> canvas shape id."""

    @abstractmethod
    def reparent_shapes(self, shape_ids: Sequence[str], parent_id: str) -> None:
        """Group shapes under a frame."""

    @abstractmethod
    def zoom_to_fit(self, shape_ids: Sequence[str]) -> None:
        """Fit the viewport to the given shapes."""


def apply_to_canvas(canvas: CanvasCollaborator, diagram: MaterializedDiagram) -> List[str]:
    """
    Draw a diagram: frame, content, connectors and labels in that order,
    then group everything under the frame and fit the viewport.

    Returns:
        Canvas ids of every created shape, frame first
    """
    id_map = canvas.create_shapes(diagram.all_primitives())
    frame_id = id_map[diagram.frame.id]
    contained = [id_map[local_id] for local_id in diagram.containment_ids if local_id in id_map]

    try:
        canvas.reparent_shapes(contained, frame_id)
    except Exception as e:
        logger.warning(f"Could not group {len(contained)} shapes under frame {frame_id}: {e}")

    canvas.zoom_to_fit([id_map[local_id] for local_id in diagram.viewport_fit_ids if local_id in id_map])
    logger.debug(f"Applied {diagram.kind.value} diagram: {len(id_map)} shapes")
    return [id_map[p.id] for p in diagram.all_primitives()]


class InMemoryCanvas(CanvasCollaborator):
    """
    Canvas that records shapes instead of drawing them.

    Used by tests and by callers that only need the resulting shape list.
    Set ``reject_reparent`` to make grouping fail.
    """

    def __init__(self, reject_reparent: bool = False):
        self.reject_reparent = reject_reparent
        self.shapes: Dict[str, CanvasPrimitive] = {}
        self.parents: Dict[str, str] = {}
        self.viewport: List[str] = []

    def create_shapes(self, primitives: Sequence[CanvasPrimitive]) -> Dict[str, str]:
        id_map = {}
        for primitive in primitives:
            shape_id = f"shape:{uuid.uuid4().hex[:12]}"
            self.shapes[shape_id] = primitive
            id_map[primitive.id] = shape_id
        return id_map

    def reparent_shapes(self, shape_ids: Sequence[str], parent_id: str) -> None:
        if self.reject_reparent:
            raise CanvasError("Reparenting is not supported by this canvas")
        if parent_id not in self.shapes:
            raise CanvasError(f"Unknown parent shape: {parent_id}")
        for shape_id in shape_ids:
            self.parents[shape_id] = parent_id

    def zoom_to_fit(self, shape_ids: Sequence[str]) -> None:
        self.viewport = list(shape_ids)

    def parent_of(self, shape_id: str) -> Optional[str]:
        return self.parents.get(shape_id)

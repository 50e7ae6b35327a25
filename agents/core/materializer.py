"""
Diagram Materializer

Turns a validated structure plus its computed layout into canvas primitives:
one frame around everything, one note per structural node, one arrow per
structural edge and a text label per labelled flow connection. Also returns
the ids the canvas should group under the frame and fit the viewport to.

Primitive ids are local and deterministic (``<prefix>/branch-0``); the canvas
collaborator maps them onto its own identifiers.
"""

import math
import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from models.canvas import CanvasPrimitive, MaterializedDiagram
from models.common import ColorTag, DiagramKind, FlowNodeType, PrimitiveKind, normalize_color
from models.diagrams import FlowDiagramStructure, MindMapStructure, Position, StickyNote
from .layout import (
    FLOW_NODE_HEIGHT,
    FLOW_NODE_WIDTH,
    STICKY_NOTE_SIZE,
    MindMapLayout,
)

logger = logging.getLogger(__name__)

FRAME_PADDING = {
    DiagramKind.MIND_MAP: 150,
    DiagramKind.STICKY_NOTES: 50,
    DiagramKind.FLOW_DIAGRAM: 80,
}

CENTER_GLYPH = "🎯 "
FLOW_NODE_STYLES = {
    FlowNodeType.START: (ColorTag.GREEN, "▶️ "),
    FlowNodeType.PROCESS: (ColorTag.BLUE, "⚙️ "),
    FlowNodeType.DECISION: (ColorTag.ORANGE, "❓ "),
    FlowNodeType.END: (ColorTag.RED, "🏁 "),
}

ARROW_GAP = 10
MIN_ARROW_LENGTH = 20
FLOW_ARROW_GAP = 5
LABEL_OFFSET_X = 15
LABEL_OFFSET_Y = -10

# (x, y, width, height)
Box = Tuple[float, float, float, float]


def _center(box: Box) -> Position:
    x, y, width, height = box
    return Position(x + width / 2, y + height / 2)


def _edge_offset(width: float, height: float, nx: float, ny: float) -> float:
    """Distance from a box center to its border along the unit vector (nx, ny)."""
    limits = []
    if abs(nx) > 1e-9:
        limits.append((width / 2) / abs(nx))
    if abs(ny) > 1e-9:
        limits.append((height / 2) / abs(ny))
    return min(limits) if limits else 0.0


def connector_points(source: Box, target: Box, gap: float = ARROW_GAP) -> Tuple[Position, Position]:
    """
    Arrow endpoints on the line between two box centers, trimmed to the box borders.

    Boxes that are too close for a visible arrow get their trims scaled down;
    coincident centers give a zero-length arrow at the center.
    """
    start_center, end_center = _center(source), _center(target)
    dx = end_center.x - start_center.x
    dy = end_center.y - start_center.y
    distance = math.hypot(dx, dy)
    if distance == 0:
        return start_center, end_center

    nx, ny = dx / distance, dy / distance
    start_trim = _edge_offset(source[2], source[3], nx, ny) + gap
    end_trim = _edge_offset(target[2], target[3], nx, ny) + gap
    available = distance - start_trim - end_trim
    min_length = min(MIN_ARROW_LENGTH, distance)
    if available < min_length:
        scale = (distance - min_length) / (start_trim + end_trim)
        start_trim *= scale
        end_trim *= scale

    return (
        Position(start_center.x + nx * start_trim, start_center.y + ny * start_trim),
        Position(end_center.x - nx * end_trim, end_center.y - ny * end_trim),
    )


def _note(primitive_id: str, box: Box, text: str, color: ColorTag, size: str) -> CanvasPrimitive:
    x, y, width, height = box
    return CanvasPrimitive(
        id=primitive_id, kind=PrimitiveKind.NOTE,
        x=x, y=y, width=width, height=height,
        color=color, text=text, size=size,
    )


def _arrow(primitive_id: str, start: Position, end: Position, color: ColorTag,
           source_id: str, target_id: str, size: str = "m") -> CanvasPrimitive:
    return CanvasPrimitive(
        id=primitive_id, kind=PrimitiveKind.ARROW,
        x=start.x, y=start.y,
        width=end.x - start.x, height=end.y - start.y,
        color=color, size=size,
        start=start, end=end,
        source_id=source_id, target_id=target_id,
    )


def _frame(primitive_id: str, title: str, boxes: Sequence[Box], padding: float) -> CanvasPrimitive:
    """Frame enclosing every box plus padding; a padded empty box at the origin when there are none."""
    if boxes:
        min_x = min(box[0] for box in boxes)
        min_y = min(box[1] for box in boxes)
        max_x = max(box[0] + box[2] for box in boxes)
        max_y = max(box[1] + box[3] for box in boxes)
    else:
        min_x = min_y = max_x = max_y = 0.0
    return CanvasPrimitive(
        id=primitive_id, kind=PrimitiveKind.FRAME,
        x=min_x - padding, y=min_y - padding,
        width=max_x - min_x + padding * 2, height=max_y - min_y + padding * 2,
        text=title,
    )


def _finalize(kind: DiagramKind, frame: CanvasPrimitive, nodes: List[CanvasPrimitive],
              edges: List[CanvasPrimitive], labels: Optional[List[CanvasPrimitive]] = None) -> MaterializedDiagram:
    labels = labels or []
    contained = [p.id for p in nodes] + [p.id for p in edges] + [p.id for p in labels]
    return MaterializedDiagram(
        kind=kind,
        frame=frame,
        primitives=nodes,
        edges=edges,
        labels=labels,
        containment_ids=contained,
        viewport_fit_ids=[frame.id] + contained,
    )


def materialize_mind_map(structure: MindMapStructure, layout: MindMapLayout,
                         id_prefix: str = "mind_map") -> MaterializedDiagram:
    """Center, branch and child notes with center->branch and branch->child arrows."""
    nodes: List[CanvasPrimitive] = []
    edges: List[CanvasPrimitive] = []
    boxes: List[Box] = []

    center_id = f"{id_prefix}/center"
    center_box = (layout.center.x, layout.center.y, layout.node_width, layout.node_height)
    nodes.append(_note(center_id, center_box, f"{CENTER_GLYPH}{structure.center_topic}", ColorTag.YELLOW, "xl"))
    boxes.append(center_box)

    for branch_index, branch in enumerate(structure.branches):
        if branch_index >= len(layout.branches):
            break
        placed = layout.branches[branch_index]
        branch_id = f"{id_prefix}/branch-{branch_index}"
        branch_box = (placed.x, placed.y, layout.node_width, layout.node_height)
        branch_color = normalize_color(branch.color, ColorTag.BLUE)
        nodes.append(_note(branch_id, branch_box, branch.text, branch_color, "l"))
        boxes.append(branch_box)

        start, end = connector_points(center_box, branch_box)
        edges.append(_arrow(f"{id_prefix}/edge-center-{branch_index}", start, end,
                            normalize_color(branch.color, ColorTag.GREY), center_id, branch_id))

        child_positions = layout.children.get(branch_index, [])
        for child_index, child in enumerate(branch.children):
            if child_index >= len(child_positions):
                break
            child_pos = child_positions[child_index]
            child_id = f"{branch_id}/child-{child_index}"
            child_box = (child_pos.x, child_pos.y, layout.child_width, layout.child_height)
            nodes.append(_note(child_id, child_box, child.text, branch_color, "m"))
            boxes.append(child_box)

            start, end = connector_points(branch_box, child_box, gap=ARROW_GAP / 2)
            edges.append(_arrow(f"{branch_id}/edge-child-{child_index}", start, end,
                                ColorTag.LIGHT_BLUE, branch_id, child_id, size="s"))

    frame = _frame(f"{id_prefix}/frame", structure.center_topic, boxes, FRAME_PADDING[DiagramKind.MIND_MAP])
    return _finalize(DiagramKind.MIND_MAP, frame, nodes, edges)


def materialize_sticky_notes(notes: Sequence[StickyNote], positions: Sequence[Position],
                             title: str = "Notes",
                             note_width: float = STICKY_NOTE_SIZE, note_height: float = STICKY_NOTE_SIZE,
                             id_prefix: str = "sticky_notes") -> MaterializedDiagram:
    """One note per sticky note, no connectors."""
    nodes = []
    boxes = []
    for index, (note, position) in enumerate(zip(notes, positions)):
        box = (position.x, position.y, note_width, note_height)
        nodes.append(_note(f"{id_prefix}/note-{index}", box, note.text,
                           normalize_color(note.color, ColorTag.YELLOW), "l"))
        boxes.append(box)

    frame = _frame(f"{id_prefix}/frame", title, boxes, FRAME_PADDING[DiagramKind.STICKY_NOTES])
    return _finalize(DiagramKind.STICKY_NOTES, frame, nodes, [])


def materialize_flow_diagram(structure: FlowDiagramStructure, positions: Mapping[str, Position],
                             title: str = "Flow Diagram",
                             node_width: float = FLOW_NODE_WIDTH, node_height: float = FLOW_NODE_HEIGHT,
                             id_prefix: str = "flow_diagram") -> MaterializedDiagram:
    """
    Typed flow nodes, one arrow per resolvable connection, labels at arrow midpoints.

    Connections naming a node that was not emitted are dropped.
    """
    nodes = []
    boxes = []
    emitted: Dict[str, str] = {}
    for index, node in enumerate(structure.nodes):
        position = positions.get(node.id)
        if position is None or node.id in emitted:
            continue
        color, glyph = FLOW_NODE_STYLES.get(node.type, FLOW_NODE_STYLES[FlowNodeType.PROCESS])
        box = (position.x, position.y, node_width, node_height)
        primitive_id = f"{id_prefix}/node-{index}"
        nodes.append(_note(primitive_id, box, f"{glyph}{node.text}", color, "l"))
        boxes.append(box)
        emitted[node.id] = primitive_id

    edges = []
    labels = []
    for index, conn in enumerate(structure.connections):
        if conn.source not in emitted or conn.target not in emitted:
            logger.debug(f"Dropping flow connection with unknown node: {conn.source} -> {conn.target}")
            continue
        source_pos, target_pos = positions[conn.source], positions[conn.target]
        start = Position(source_pos.x + node_width / 2, source_pos.y + node_height + FLOW_ARROW_GAP)
        end = Position(target_pos.x + node_width / 2, target_pos.y - FLOW_ARROW_GAP)
        edge_id = f"{id_prefix}/edge-{index}"
        edges.append(_arrow(edge_id, start, end, ColorTag.GREY, emitted[conn.source], emitted[conn.target]))

        if conn.label and conn.label.strip():
            labels.append(CanvasPrimitive(
                id=f"{edge_id}/label",
                kind=PrimitiveKind.TEXT,
                x=(source_pos.x + target_pos.x) / 2 + node_width / 2 + LABEL_OFFSET_X,
                y=(source_pos.y + node_height + target_pos.y) / 2 + LABEL_OFFSET_Y,
                color=ColorTag.GREY,
                text=conn.label.strip(),
            ))

    frame = _frame(f"{id_prefix}/frame", title, boxes, FRAME_PADDING[DiagramKind.FLOW_DIAGRAM])
    return _finalize(DiagramKind.FLOW_DIAGRAM, frame, nodes, edges, labels)

"""
Whiteboard Layout Engine

Pure functions turning a validated structure and an anchor point (usually
the viewport center) into absolute canvas positions:

- Radial tree for mind maps: center -> branches on a circle -> children on
  a secondary circle around each branch
- Grid for sticky notes: wider-than-tall, centered on the anchor
- Vertical sequence for flow diagrams: input order, one column
- Layered flow layout: longest-path layers over the connection graph

All returned positions are top-left corners of the node boxes. None of the
functions raise on empty input.
"""

import math
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set

from models.diagrams import FlowConnection, FlowNode, MindMapStructure, Position

logger = logging.getLogger(__name__)

# Radial tree
MIND_MAP_BASE_RADIUS = 350
MIND_MAP_RADIUS_STEP = 50
MIND_MAP_CROWDING_THRESHOLD = 4
MIND_MAP_CHILD_RADIUS = 200
MIND_MAP_MAX_CHILD_SPREAD = math.pi / 2
MIND_MAP_SPREAD_PER_CHILD = math.pi / 4
MIND_MAP_START_ANGLE = -math.pi / 2  # straight up
CHILD_SIZE_RATIO = 0.8

# Grid
STICKY_NOTE_SIZE = 220
STICKY_NOTE_SPACING = 60

# Flow
FLOW_NODE_WIDTH = 220
FLOW_NODE_HEIGHT = 100
FLOW_VERTICAL_SPACING = 80
FLOW_HORIZONTAL_SPACING = 60


@dataclass(frozen=True)
class AnglePosition:
    """Top-left corner of a radially placed node plus its placement angle (radians)"""
    x: float
    y: float
    angle: float


@dataclass
class MindMapLayout:
    center: Position
    branches: List[AnglePosition] = field(default_factory=list)
    children: Dict[int, List[AnglePosition]] = field(default_factory=dict)
    branch_radius: float = MIND_MAP_BASE_RADIUS
    child_radius: float = MIND_MAP_CHILD_RADIUS
    node_width: float = 220
    node_height: float = 120
    child_width: float = 176
    child_height: float = 96


def mind_map_branch_radius(branch_count: int) -> float:
    """Base radius grows once there are more than four branches."""
    return MIND_MAP_BASE_RADIUS + max(0, branch_count - MIND_MAP_CROWDING_THRESHOLD) * MIND_MAP_RADIUS_STEP


def child_angles(branch_angle: float, child_count: int) -> List[float]:
    """
    Angles for a branch's children, spread around the branch's own angle.

    The window widens by 45 degrees per child up to 90 degrees. A single
    child sits exactly on the branch angle.
    """
    if child_count <= 0:
        return []
    if child_count == 1:
        return [branch_angle]
    spread = min(MIND_MAP_MAX_CHILD_SPREAD, MIND_MAP_SPREAD_PER_CHILD * child_count)
    step = spread / max(child_count - 1, 1)
    start = branch_angle - spread / 2
    return [start + index * step for index in range(child_count)]


def calculate_mind_map_layout(
    structure: MindMapStructure,
    anchor: Position,
    node_width: float = 220,
    node_height: float = 120,
    child_width: float = None,
    child_height: float = None,
) -> MindMapLayout:
    """
    Radial tree layout for a mind map.

    Branches are evenly spaced over the full circle starting straight up.
    Placement is strictly top-down: center, then branches, then children;
    nothing is moved once placed.
    """
    child_width = node_width * CHILD_SIZE_RATIO if child_width is None else child_width
    child_height = node_height * CHILD_SIZE_RATIO if child_height is None else child_height

    branch_count = len(structure.branches)
    branch_radius = mind_map_branch_radius(branch_count)
    layout = MindMapLayout(
        center=Position(anchor.x - node_width / 2, anchor.y - node_height / 2),
        branch_radius=branch_radius,
        child_radius=MIND_MAP_CHILD_RADIUS,
        node_width=node_width,
        node_height=node_height,
        child_width=child_width,
        child_height=child_height,
    )
    if branch_count == 0:
        return layout

    angle_step = 2 * math.pi / branch_count
    for index, branch in enumerate(structure.branches):
        angle = MIND_MAP_START_ANGLE + index * angle_step
        branch_cx = anchor.x + math.cos(angle) * branch_radius
        branch_cy = anchor.y + math.sin(angle) * branch_radius
        layout.branches.append(AnglePosition(branch_cx - node_width / 2, branch_cy - node_height / 2, angle))

        if not branch.children:
            continue
        layout.children[index] = [
            AnglePosition(
                branch_cx + math.cos(child_angle) * MIND_MAP_CHILD_RADIUS - child_width / 2,
                branch_cy + math.sin(child_angle) * MIND_MAP_CHILD_RADIUS - child_height / 2,
                child_angle,
            )
            for child_angle in child_angles(angle, len(branch.children))
        ]

    logger.debug(f"Mind map layout: {branch_count} branches, radius {branch_radius}")
    return layout


def sticky_notes_columns(count: int) -> int:
    """Column count favoring wider-than-tall grids."""
    if count <= 0:
        return 0
    return min(count, max(3, math.ceil(math.sqrt(count * 1.5))))


def calculate_sticky_notes_layout(
    count: int,
    anchor: Position,
    note_width: float = STICKY_NOTE_SIZE,
    note_height: float = STICKY_NOTE_SIZE,
    spacing: float = STICKY_NOTE_SPACING,
) -> List[Position]:
    """Row-major grid whose centroid is the anchor."""
    if count <= 0:
        return []
    cols = sticky_notes_columns(count)
    rows = math.ceil(count / cols)

    total_width = cols * note_width + (cols - 1) * spacing
    total_height = rows * note_height + (rows - 1) * spacing
    start_x = anchor.x - total_width / 2
    start_y = anchor.y - total_height / 2

    return [
        Position(
            start_x + (index % cols) * (note_width + spacing),
            start_y + (index // cols) * (note_height + spacing),
        )
        for index in range(count)
    ]


def calculate_flow_diagram_layout(
    nodes: Sequence[FlowNode],
    anchor: Position,
    node_width: float = FLOW_NODE_WIDTH,
    node_height: float = FLOW_NODE_HEIGHT,
    spacing: float = FLOW_VERTICAL_SPACING,
) -> "OrderedDict[str, Position]":
    """
    Stack nodes in input order in a single column centered on the anchor.

    Connection topology is ignored; the generator is trusted to list nodes
    in reading order.
    """
    positions: "OrderedDict[str, Position]" = OrderedDict()
    if not nodes:
        return positions

    total_height = len(nodes) * node_height + (len(nodes) - 1) * spacing
    start_y = anchor.y - total_height / 2
    for index, node in enumerate(nodes):
        positions[node.id] = Position(anchor.x - node_width / 2, start_y + index * (node_height + spacing))
    return positions


def _back_edges(node_ids: Sequence[str], adjacency: Dict[str, List[str]]) -> Set[tuple]:
    """Edges closing a cycle, found by DFS from each node in input order."""
    state: Dict[str, int] = {}  # 1 = on stack, 2 = done
    back = set()

    for root in node_ids:
        if root in state:
            continue
        stack = [(root, iter(adjacency[root]))]
        state[root] = 1
        while stack:
            current, successors = stack[-1]
            advanced = False
            for succ in successors:
                if state.get(succ) == 1:
                    back.add((current, succ))
                elif succ not in state:
                    state[succ] = 1
                    stack.append((succ, iter(adjacency[succ])))
                    advanced = True
                    break
            if not advanced:
                state[current] = 2
                stack.pop()
    return back


def flow_layers(nodes: Sequence[FlowNode], connections: Iterable[FlowConnection]) -> Dict[str, int]:
    """
    Longest-path layer index per node id.

    Connections to unknown ids and cycle-closing edges are ignored, so a
    "retry" loop back to a decision does not push the decision downwards.
    """
    node_ids = [node.id for node in nodes]
    known = set(node_ids)
    adjacency: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    for conn in connections:
        if conn.source in known and conn.target in known and conn.target not in adjacency[conn.source]:
            adjacency[conn.source].append(conn.target)

    back = _back_edges(node_ids, adjacency)
    indegree = {node_id: 0 for node_id in node_ids}
    for source, targets in adjacency.items():
        for target in targets:
            if (source, target) not in back:
                indegree[target] += 1

    layer = {node_id: 0 for node_id in node_ids}
    queue = [node_id for node_id in node_ids if indegree[node_id] == 0]
    while queue:
        current = queue.pop(0)
        for target in adjacency[current]:
            if (current, target) in back:
                continue
            layer[target] = max(layer[target], layer[current] + 1)
            indegree[target] -= 1
            if indegree[target] == 0:
                queue.append(target)
    return layer


def calculate_layered_flow_layout(
    nodes: Sequence[FlowNode],
    connections: Sequence[FlowConnection],
    anchor: Position,
    node_width: float = FLOW_NODE_WIDTH,
    node_height: float = FLOW_NODE_HEIGHT,
    vertical_spacing: float = FLOW_VERTICAL_SPACING,
    horizontal_spacing: float = FLOW_HORIZONTAL_SPACING,
) -> "OrderedDict[str, Position]":
    """
    Layered flow layout: decision branches get their own lanes.

    Nodes of the same layer sit side by side in input order; the whole
    diagram is centered on the anchor. Result keys keep input node order.
    """
    positions: "OrderedDict[str, Position]" = OrderedDict()
    if not nodes:
        return positions

    layer_of = flow_layers(nodes, connections)
    layers: Dict[int, List[str]] = {}
    for node in nodes:
        layers.setdefault(layer_of[node.id], []).append(node.id)

    layer_count = max(layers) + 1
    total_height = layer_count * node_height + (layer_count - 1) * vertical_spacing
    start_y = anchor.y - total_height / 2

    placed: Dict[str, Position] = {}
    for layer_index, members in layers.items():
        row_width = len(members) * node_width + (len(members) - 1) * horizontal_spacing
        row_x = anchor.x - row_width / 2
        y = start_y + layer_index * (node_height + vertical_spacing)
        for slot, node_id in enumerate(members):
            placed[node_id] = Position(row_x + slot * (node_width + horizontal_spacing), y)

    for node in nodes:
        positions[node.id] = placed[node.id]
    logger.debug(f"Layered flow layout: {len(nodes)} nodes in {layer_count} layers")
    return positions

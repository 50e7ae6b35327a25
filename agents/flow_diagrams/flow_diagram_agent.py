"""
Flow Diagram Agent

Parses node/connection completions, falls back to a six-node template with a
retry loop, and lays the flow out either in input order (default) or in
longest-path layers, depending on FLOW_LAYOUT_STRATEGY.
"""

import logging
from typing import Any, Dict, Optional

from config.settings import config
from models.canvas import MaterializedDiagram
from models.common import DiagramKind, FlowNodeType
from models.diagrams import FlowConnection, FlowDiagramStructure, FlowNode, Position
from prompts import build_flow_diagram_prompt
from ..core.agent_utils import extract_json_from_response, get_node_text, is_text_field, preview
from ..core.base_agent import BaseAgent
from ..core.intent_classifier import Intent
from ..core.layout import (
    FLOW_NODE_HEIGHT,
    FLOW_NODE_WIDTH,
    calculate_flow_diagram_layout,
    calculate_layered_flow_layout,
)
from ..core.materializer import materialize_flow_diagram

logger = logging.getLogger(__name__)

_FALLBACK_TEXT = {
    'fr': {
        'start': 'Début', 'analyze': 'Analyser: {topic}', 'ready': 'Prêt?',
        'prepare': 'Préparer davantage', 'execute': 'Exécuter', 'end': 'Fin',
        'no': 'Non', 'yes': 'Oui',
    },
    'en': {
        'start': 'Start', 'analyze': 'Analyze: {topic}', 'ready': 'Ready?',
        'prepare': 'Prepare further', 'execute': 'Execute', 'end': 'End',
        'no': 'No', 'yes': 'Yes',
    },
}


def parse_flow_diagram(response: Optional[str]) -> Optional[FlowDiagramStructure]:
    """
    Parse a flow diagram completion.

    Requires ``nodes`` and ``connections`` arrays. Nodes need string ``id``
    and text; an unknown ``type`` becomes process and a repeated id keeps its
    first node. Connections need string ``from`` and ``to``. References are
    not checked here; the materializer drops dangling ones.
    """
    parsed = extract_json_from_response(response, expect='object')
    if not isinstance(parsed, dict):
        return None

    raw_nodes = parsed.get('nodes')
    raw_connections = parsed.get('connections')
    if not isinstance(raw_nodes, list) or not isinstance(raw_connections, list):
        logger.error("Invalid flow diagram structure: missing nodes or connections arrays")
        return None

    nodes = []
    seen = set()
    for raw_node in raw_nodes:
        text = get_node_text(raw_node) if isinstance(raw_node, dict) else ''
        if not is_text_field(raw_node, 'id') or not text:
            logger.debug(f"Dropping invalid flow node: {preview(raw_node, 80)}")
            continue
        if raw_node['id'] in seen:
            logger.debug(f"Dropping duplicate flow node id: {raw_node['id']}")
            continue
        seen.add(raw_node['id'])
        nodes.append(FlowNode(id=raw_node['id'], text=text, type=raw_node.get('type')))

    if not nodes:
        logger.error("Flow diagram has no usable node")
        return None

    connections = []
    for raw_conn in raw_connections:
        if not (is_text_field(raw_conn, 'from') and is_text_field(raw_conn, 'to')):
            logger.debug(f"Dropping invalid flow connection: {preview(raw_conn, 80)}")
            continue
        label = raw_conn.get('label')
        connections.append(FlowConnection(
            source=raw_conn['from'],
            target=raw_conn['to'],
            label=label if isinstance(label, str) else None,
        ))

    logger.info(f"Parsed flow diagram with {len(nodes)} nodes and {len(connections)} connections")
    return FlowDiagramStructure(nodes=nodes, connections=connections)


def generate_fallback_flow_diagram(topic: str, language: str = 'fr') -> FlowDiagramStructure:
    """Start, analysis, a ready? decision with a preparation loop, execution, end."""
    text = _FALLBACK_TEXT.get(language, _FALLBACK_TEXT['fr'])
    return FlowDiagramStructure(
        nodes=[
            FlowNode(id='start', text=text['start'], type=FlowNodeType.START),
            FlowNode(id='step1', text=text['analyze'].format(topic=topic[:25]), type=FlowNodeType.PROCESS),
            FlowNode(id='decision', text=text['ready'], type=FlowNodeType.DECISION),
            FlowNode(id='step2', text=text['prepare'], type=FlowNodeType.PROCESS),
            FlowNode(id='step3', text=text['execute'], type=FlowNodeType.PROCESS),
            FlowNode(id='end', text=text['end'], type=FlowNodeType.END),
        ],
        connections=[
            FlowConnection(source='start', target='step1'),
            FlowConnection(source='step1', target='decision'),
            FlowConnection(source='decision', target='step2', label=text['no']),
            FlowConnection(source='decision', target='step3', label=text['yes']),
            FlowConnection(source='step2', target='decision'),
            FlowConnection(source='step3', target='end'),
        ],
    )


class FlowDiagramAgent(BaseAgent):
    """Typed flow nodes joined by top-to-bottom arrows."""

    diagram_type = DiagramKind.FLOW_DIAGRAM

    def __init__(self, language: str = 'fr', layout_strategy: Optional[str] = None,
                 node_width: float = FLOW_NODE_WIDTH, node_height: float = FLOW_NODE_HEIGHT):
        super().__init__(language=language)
        self.layout_strategy = layout_strategy or config.FLOW_LAYOUT_STRATEGY
        self.node_width = node_width
        self.node_height = node_height

    def build_prompt(self, intent: Intent, context: Any = None) -> str:
        return build_flow_diagram_prompt(intent.topic, context, self.language)

    def parse_response(self, raw_completion: str) -> Optional[FlowDiagramStructure]:
        return parse_flow_diagram(raw_completion)

    def generate_fallback(self, intent: Intent) -> FlowDiagramStructure:
        return generate_fallback_flow_diagram(intent.topic, self.language)

    def calculate_layout(self, structure: FlowDiagramStructure, anchor: Position) -> Dict[str, Position]:
        if self.layout_strategy == 'layered':
            return calculate_layered_flow_layout(structure.nodes, structure.connections, anchor,
                                                 self.node_width, self.node_height)
        return calculate_flow_diagram_layout(structure.nodes, anchor, self.node_width, self.node_height)

    def materialize(self, structure: FlowDiagramStructure, layout: Dict[str, Position],
                    intent: Intent) -> MaterializedDiagram:
        return materialize_flow_diagram(structure, layout, title=intent.topic,
                                        node_width=self.node_width, node_height=self.node_height)

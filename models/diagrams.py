"""
Diagram Structure Models
========================

Typed structures produced by the response parsers and the fallback generators,
consumed by the layout engine and the materializer.

Field names follow the JSON contract given to the language model
(``centerTopic``, ``from``/``to``); Python attributes are snake_case and
populated through aliases.
"""

from dataclasses import dataclass
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import ColorTag, FlowNodeType, normalize_color


@dataclass(frozen=True)
class Position:
    """Point in canvas (world) coordinates"""
    x: float
    y: float


class Leaf(BaseModel):
    """Child item of a mind map branch"""
    text: str


class Branch(BaseModel):
    """Mind map branch with its leaf children"""
    text: str
    color: ColorTag = ColorTag.BLUE
    children: List[Leaf] = Field(default_factory=list)

    @field_validator('color', mode='before')
    @classmethod
    def coerce_color(cls, v):
        return normalize_color(v, ColorTag.BLUE)


class MindMapStructure(BaseModel):
    """Center topic plus at least one branch"""
    model_config = ConfigDict(populate_by_name=True)

    center_topic: str = Field(..., alias='centerTopic', min_length=1)
    branches: List[Branch] = Field(..., min_length=1)


class StickyNote(BaseModel):
    text: str
    color: ColorTag = ColorTag.YELLOW

    @field_validator('color', mode='before')
    @classmethod
    def coerce_color(cls, v):
        return normalize_color(v, ColorTag.YELLOW)


class FlowNode(BaseModel):
    id: str
    text: str
    type: FlowNodeType = FlowNodeType.PROCESS

    @field_validator('type', mode='before')
    @classmethod
    def coerce_type(cls, v):
        if isinstance(v, FlowNodeType):
            return v
        if isinstance(v, str):
            try:
                return FlowNodeType(v.strip().lower())
            except ValueError:
                pass
        return FlowNodeType.PROCESS


class FlowConnection(BaseModel):
    """Directed edge between two flow nodes, referenced by id"""
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., alias='from')
    target: str = Field(..., alias='to')
    label: Optional[str] = None


class FlowDiagramStructure(BaseModel):
    nodes: List[FlowNode] = Field(default_factory=list)
    connections: List[FlowConnection] = Field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

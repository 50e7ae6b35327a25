"""
Common Pydantic Models and Enums
=================================

Shared enumerations used by the diagram structures, the canvas primitives
and the API models.
"""

from enum import Enum
from typing import Optional, Union


class DiagramKind(str, Enum):
    """Content kinds the whiteboard assistant can produce"""
    MIND_MAP = "mind_map"
    STICKY_NOTES = "sticky_notes"
    FLOW_DIAGRAM = "flow_diagram"
    TEXT = "text"
    FRAME = "frame"
    BRAINSTORM = "brainstorm"


# Kinds that go through prompt -> parse -> layout -> materialize.
# The others are answered by the chat flow directly.
GENERATED_KINDS = (DiagramKind.MIND_MAP, DiagramKind.STICKY_NOTES, DiagramKind.FLOW_DIAGRAM)


class ColorTag(str, Enum):
    """Colors supported by the canvas"""
    YELLOW = "yellow"
    BLUE = "blue"
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"
    VIOLET = "violet"
    GREY = "grey"
    BLACK = "black"
    LIGHT_BLUE = "light-blue"
    LIGHT_GREEN = "light-green"
    LIGHT_RED = "light-red"
    LIGHT_VIOLET = "light-violet"


# Palette offered to the language model in prompts
GENERATION_PALETTE = (
    ColorTag.YELLOW,
    ColorTag.BLUE,
    ColorTag.GREEN,
    ColorTag.ORANGE,
    ColorTag.RED,
    ColorTag.VIOLET,
)

_COLOR_ALIASES = {
    'purple': ColorTag.VIOLET,
    'gray': ColorTag.GREY,
    'light-gray': ColorTag.GREY,
    'light-grey': ColorTag.GREY,
    'light-purple': ColorTag.LIGHT_VIOLET,
}


def normalize_color(value: Optional[Union[str, ColorTag]], default: ColorTag = ColorTag.YELLOW) -> ColorTag:
    """
    Map any color string onto a canvas color.

    Never raises: unknown, empty or non-string values return ``default``.
    Spaces and underscores are accepted in place of dashes ("light blue").
    """
    if isinstance(value, ColorTag):
        return value
    if not isinstance(value, str):
        return default
    key = value.strip().lower().replace('_', '-').replace(' ', '-')
    if key in _COLOR_ALIASES:
        return _COLOR_ALIASES[key]
    try:
        return ColorTag(key)
    except ValueError:
        return default


class FlowNodeType(str, Enum):
    """Flow diagram node types"""
    START = "start"
    END = "end"
    PROCESS = "process"
    DECISION = "decision"


class PrimitiveKind(str, Enum):
    """Shape vocabulary of the canvas collaborator"""
    NOTE = "note"
    FRAME = "frame"
    ARROW = "arrow"
    TEXT = "text"


class Language(str, Enum):
    """Supported languages"""
    FR = "fr"
    EN = "en"

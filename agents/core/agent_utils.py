"""
Agent Utilities Module for Whiteboard AI

This module contains utility functions shared by the diagram agents:
extracting JSON from raw completion text, cleaning legitimate formatting
issues, and reading node text from loosely shaped model output.
"""

import re
import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r'```[a-zA-Z]*[ \t]*')
_OBJECT_SPAN = re.compile(r'\{.*\}', re.DOTALL)
_ARRAY_SPAN = re.compile(r'\[.*\]', re.DOTALL)


def preview(text: Any, limit: int = 500) -> str:
    """Truncate text for log messages."""
    text = str(text)
    return text[:limit] + "..." if len(text) > limit else text


def strip_code_fences(text: str) -> str:
    """
    Remove Markdown code-fence markers (```json, ```) wherever they appear.

    Only the markers go; the fenced content and any surrounding prose stay.
    """
    return _FENCE_OPEN.sub('', text).strip()


def extract_json_from_response(response_content: Optional[str], expect: str = 'object') -> Any:
    """
    Extract and deserialize JSON from completion text.

    The JSON span is located with a greedy first-to-last bracket match on the
    fence-stripped text: ``{...}`` when ``expect='object'``, ``[...]`` when
    ``expect='array'``. This tolerates commentary before and after the JSON
    but assumes the text holds one top-level blob of that bracket type.

    Args:
        response_content: Raw completion text (may be None or empty)
        expect: 'object' or 'array'

    Returns:
        The deserialized value, or None if nothing could be parsed. Never raises.
    """
    if not response_content or not isinstance(response_content, str):
        logger.warning("Empty response content provided")
        return None

    content = strip_code_fences(response_content)
    pattern = _ARRAY_SPAN if expect == 'array' else _OBJECT_SPAN
    match = pattern.search(content)
    if not match:
        logger.error(f"Failed to extract JSON: no {expect} found in response. Content: {preview(content)}")
        return None

    json_content = match.group(0)
    try:
        return json.loads(json_content)
    except json.JSONDecodeError as e:
        logger.debug(f"Initial JSON parse failed: {e} (position: {e.pos}). Attempting repair...")
    except (RecursionError, ValueError) as e:
        logger.error(f"Failed to parse JSON: {e.__class__.__name__}. Content preview: {preview(json_content)}")
        return None

    cleaned = _clean_json_string(json_content)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON: {e} (position: {e.pos}). Content preview: {preview(cleaned)}")
        return None
    except (RecursionError, ValueError) as e:
        logger.error(f"Failed to parse JSON: {e.__class__.__name__}. Content preview: {preview(cleaned)}")
        return None


def _clean_json_string(text: str) -> str:
    """
    Fix formatting issues that don't change JSON semantics.

    - Zero-width and control character removal
    - Trailing comma removal before ] or }

    Structural problems (truncated JSON, missing brackets) are left alone.
    """
    text = re.sub(r'[\u200B-\u200D\uFEFF]', '', text)
    text = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F]', '', text)
    text = re.sub(r',\s*(\]|\})', r'\1', text)
    return text.strip()


def get_node_text(node: Any, default: str = '') -> str:
    """
    Read the display text of a node that may use 'text' or 'label'.

    Bare strings are accepted as their own text. Non-string values yield
    ``default``.
    """
    if isinstance(node, str):
        return node if node.strip() else default
    if not isinstance(node, dict):
        return default
    for key in ('text', 'label'):
        value = node.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return default


def is_text_field(node: Any, key: str) -> bool:
    """True if ``node`` is a dict whose ``key`` holds a string."""
    return isinstance(node, dict) and isinstance(node.get(key), str)

"""
Main Agent Module for Whiteboard AI

This module contains the workflow that turns a chat message into whiteboard
content: classify the intent, pick the diagram agent, await one completion,
parse (or fall back), lay out and materialize.

Features:
- Keyword-based intent classification (French and English)
- Mind maps, sticky notes and flow diagrams through specialized agents
- Deterministic fallback content when the completion is unusable
- Localized, retryable error reporting when the completion itself fails
"""

import time
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from config.settings import SUPPORTED_LANGUAGES, config
from models.common import DiagramKind, GENERATED_KINDS
from models.diagrams import Position
from models.messages import Messages
from services.error_handler import is_retryable
from agents import get_agent
from agents.core.base_agent import CompletionFn
from agents.core.intent_classifier import Intent, classify, extract_count

logger = logging.getLogger(__name__)

MAX_PROMPT_LENGTH = 10000


def validate_inputs(user_prompt: str, language: str) -> None:
    """
    Validate input parameters for the workflow.

    Raises:
        ValueError: If inputs are invalid
    """
    if not user_prompt or not isinstance(user_prompt, str) or not user_prompt.strip():
        raise ValueError("User prompt cannot be empty or None")

    if len(user_prompt.strip()) > MAX_PROMPT_LENGTH:
        raise ValueError(f"User prompt too long (max {MAX_PROMPT_LENGTH} characters)")

    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Language must be one of {', '.join(SUPPORTED_LANGUAGES)}")


def _resolve_intent(user_prompt: str, forced_kind: Optional[str]) -> Intent:
    intent = classify(user_prompt)
    if not forced_kind:
        return intent

    kind = DiagramKind(forced_kind)
    logger.debug(f"Using forced diagram type: {kind.value} (classified as {intent.kind.value})")
    count = intent.count
    if kind == DiagramKind.STICKY_NOTES and count is None:
        count = extract_count(user_prompt)
    return replace(intent, kind=kind, confidence=1.0, count=count)


def _result(intent: Intent, **fields) -> Dict[str, Any]:
    result = {
        'success': False,
        'diagram_type': intent.kind.value,
        'topic': intent.topic,
        'confidence': intent.confidence,
        'count': intent.count,
        'used_fallback': False,
        'handled_by_chat': False,
        'diagram': None,
        'error': None,
        'retryable': False,
    }
    result.update(fields)
    return result


async def agent_whiteboard_workflow(
    user_prompt: str,
    completion: CompletionFn,
    context: Any = None,
    anchor: Optional[Position] = None,
    language: str = None,
    forced_kind: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Generate whiteboard content for one chat message.

    Args:
        user_prompt: The user's chat message
        completion: Async callable, prompt in, raw completion text out
        context: Optional profile/job facts for the prompt
        anchor: Canvas point to center the diagram on (viewport center)
        language: 'fr' or 'en'; defaults to DEFAULT_LANGUAGE
        forced_kind: Skip classification and generate this diagram kind

    Returns:
        dict with success, diagram_type, topic, confidence, used_fallback,
        diagram (MaterializedDiagram), error and retryable. Text, frame and
        brainstorm requests come back with handled_by_chat=True.
    """
    language = language or config.DEFAULT_LANGUAGE
    workflow_start_time = time.time()

    try:
        validate_inputs(user_prompt, language)
    except ValueError as e:
        logger.warning(f"Whiteboard workflow rejected input: {e}")
        error_lang = language if language in SUPPORTED_LANGUAGES else config.DEFAULT_LANGUAGE
        return _result(
            classify(user_prompt if isinstance(user_prompt, str) else ''),
            error=Messages.error('invalid_prompt', error_lang),
            error_type='validation',
        )

    try:
        intent = _resolve_intent(user_prompt, forced_kind)
    except ValueError:
        logger.warning(f"Unknown forced diagram type: {forced_kind}")
        return _result(
            classify(user_prompt),
            error=Messages.error('unsupported_diagram_type', language, forced_kind),
            error_type='validation',
        )

    if intent.kind not in GENERATED_KINDS:
        logger.debug(f"'{intent.kind.value}' request left to the chat flow")
        return _result(intent, handled_by_chat=True)

    agent = get_agent(intent.kind.value, language=language)
    try:
        build = await agent.generate_graph(intent, completion, context=context, anchor=anchor)
    except Exception as e:
        logger.error(f"Whiteboard generation failed for {intent.kind.value} '{intent.topic}': {e}")
        return _result(
            intent,
            error=Messages.error('generation_failed', language),
            error_type='generation',
            retryable=is_retryable(e),
        )

    elapsed = time.time() - workflow_start_time
    logger.info(
        f"Whiteboard workflow: {intent.kind.value} '{intent.topic}' in {elapsed:.2f}s "
        f"(fallback={build.used_fallback})"
    )
    return _result(
        intent,
        success=True,
        used_fallback=build.used_fallback,
        diagram=build.diagram,
        processing_time=elapsed,
    )

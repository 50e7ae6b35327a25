"""
Whiteboard API Routes
=====================

Intent classification and diagram generation endpoints for the whiteboard
chat assistant.
"""

import time
import logging

from fastapi import APIRouter, Depends, Header, HTTPException
from typing import Optional

from agents import main_agent as agent
from agents.core.base_agent import CompletionFn
from agents.core.intent_classifier import classify, is_creation_request
from clients.llm import get_completion_client
from models import (
    IntentRequest,
    IntentResponse,
    Messages,
    WhiteboardGenerateRequest,
    WhiteboardGenerateResponse,
    get_request_language,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/whiteboard", tags=["whiteboard"])


def get_completion_service() -> CompletionFn:
    """Completion callable used for generation; overridden in tests."""
    return get_completion_client()


@router.post('/intent', response_model=IntentResponse)
async def classify_intent(req: IntentRequest):
    """Classify a chat message without generating anything."""
    intent = classify(req.prompt)
    return IntentResponse(
        diagram_type=intent.kind.value,
        confidence=intent.confidence,
        topic=intent.topic,
        count=intent.count,
        is_creation_request=is_creation_request(req.prompt),
    )


@router.post('/generate', response_model=WhiteboardGenerateResponse)
async def generate_whiteboard_content(
    req: WhiteboardGenerateRequest,
    x_language: Optional[str] = Header(None),
    completion: CompletionFn = Depends(get_completion_service),
):
    """
    Generate whiteboard content (mind map, sticky notes or flow diagram) from a chat message.

    Completion failures come back as ``success=False`` with a localized,
    retryable message rather than an HTTP error.
    """
    language = req.language.value
    lang = get_request_language(x_language) if x_language else language

    prompt = req.prompt.strip()
    if not prompt:
        raise HTTPException(
            status_code=400,
            detail=Messages.error("invalid_prompt", lang)
        )

    request_id = f"wb_{int(time.time()*1000)}"
    logger.debug(f"[{request_id}] Request: language={language!r}, diagram_type={req.diagram_type}")

    result = await agent.agent_whiteboard_workflow(
        prompt,
        completion,
        context=req.context,
        anchor=req.anchor.to_position() if req.anchor else None,
        language=language,
        forced_kind=req.diagram_type.value if req.diagram_type else None,
    )

    logger.debug(f"[{request_id}] {result['diagram_type']}: success={result['success']}")
    return WhiteboardGenerateResponse(**{
        key: value for key, value in result.items()
        if key in WhiteboardGenerateResponse.model_fields
    })

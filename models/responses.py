"""
Response Models
===============

Pydantic models for API response validation and documentation.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

from .canvas import MaterializedDiagram


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str = Field(..., description="Error message")
    error_type: Optional[str] = Field(None, description="Type of error")
    context: Optional[Dict[str, Any]] = Field(None, description="Additional error context")
    timestamp: Optional[float] = Field(None, description="Error timestamp")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "error": "Le message est vide ou invalide",
            "error_type": "validation",
            "timestamp": 1696800000.0
        }
    })


class IntentResponse(BaseModel):
    """Response model for /api/whiteboard/intent"""
    diagram_type: str = Field(..., description="Classified content kind")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Classifier confidence")
    topic: str = Field(..., description="Subject extracted from the message")
    count: Optional[int] = Field(None, description="Requested number of sticky notes")
    is_creation_request: bool = Field(False, description="Whether the message asks to create content")


class WhiteboardGenerateResponse(BaseModel):
    """Response model for /api/whiteboard/generate"""
    success: bool = Field(..., description="Whether generation succeeded")
    diagram_type: Optional[str] = Field(None, description="Classified or forced content kind")
    topic: Optional[str] = Field(None, description="Subject extracted from the message")
    confidence: Optional[float] = Field(None, description="Classifier confidence")
    used_fallback: bool = Field(False, description="Whether fallback content replaced an unusable completion")
    handled_by_chat: bool = Field(False, description="Whether the request is left to the chat flow")
    diagram: Optional[MaterializedDiagram] = Field(None, description="Canvas primitives to draw")
    error: Optional[str] = Field(None, description="Localized error message if failed")
    retryable: bool = Field(False, description="Whether retrying may succeed")
    processing_time: Optional[float] = Field(None, description="Workflow duration in seconds")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "success": True,
            "diagram_type": "mind_map",
            "topic": "télétravail",
            "confidence": 0.9,
            "used_fallback": False,
        }
    })


class HealthResponse(BaseModel):
    """Response model for /health endpoint"""
    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Application version")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "status": "ok",
            "version": "1.0.0"
        }
    })

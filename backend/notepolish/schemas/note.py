"""
NotePolish Backend - Pydantic Request/Response Schemas
========================================================

What:  Pydantic models defining the HTTP contract of the notes and AI routes.
How:   FastAPI validates request bodies against these models, serializes
       responses by alias (camelCase on the wire), and generates OpenAPI docs.

Input fields on request models are deliberately loose (`Any`, optional):
blank or wrongly-typed input is rejected by the services with the exact
400 messages clients rely on ("No content provided", "Missing required
note fields."), not by FastAPI's generic 422.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from notepolish.schemas.completion import SummaryResult


# ══════════════════════════════════════════════════════════════════════════
# AI Routes
# ══════════════════════════════════════════════════════════════════════════


class BeautifyRequest(BaseModel):
    content: Any = Field(default=None, description="Raw notes to reformat")


class BeautifyResponse(BaseModel):
    result: str = Field(description="Beautified notes, exactly as generated")


class SummarizeRequest(BaseModel):
    text: Any = Field(default=None, description="Notes to summarize")


class SummarizeResponse(BaseModel):
    success: bool = True
    data: SummaryResult


# ══════════════════════════════════════════════════════════════════════════
# Saved Notes
# ══════════════════════════════════════════════════════════════════════════


class SaveNoteRequest(BaseModel):
    """Body of POST /api/save. All four fields are required by NoteService."""

    model_config = ConfigDict(populate_by_name=True)

    raw_text: Optional[str] = Field(default=None, alias="rawText")
    beautified_text: Optional[str] = Field(default=None, alias="beautifiedText")
    summary_text: Optional[str] = Field(default=None, alias="summaryText")
    takeaways: Optional[List[str]] = Field(default=None)


class NoteResponse(BaseModel):
    """Full representation of a saved note."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    user_id: uuid.UUID = Field(alias="userId")
    raw_text: str = Field(alias="rawText")
    beautified_text: str = Field(alias="beautifiedText")
    summary_text: str = Field(alias="summaryText")
    takeaways: List[str]
    created_at: datetime = Field(alias="createdAt")


class SaveNoteResponse(BaseModel):
    success: bool = True
    data: NoteResponse


class NoteListResponse(BaseModel):
    """GET /api/notes: the caller's notes, newest first."""

    success: bool = True
    data: List[NoteResponse]


# ══════════════════════════════════════════════════════════════════════════
# Errors & Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body produced by the global exception handlers.

    Example:
        {
            "error": "The AI service is currently busy or slow. Please try again in a few moments.",
            "details": {"reason": "timeout", "attempts": 2},
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Optional diagnostic context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    completion_provider: str = Field(description="Provider status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")

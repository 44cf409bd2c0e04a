"""
NotePolish Backend - Completion Pipeline Types
================================================

What:  Immutable value types flowing through the completion pipeline.
Who:   Produced and consumed by services/invocation.py, services/retry.py,
       services/segmenter.py and services/pipeline.py.
When:  Created per incoming request and discarded after the response is sent.

Types:
    CompletionRequest  - what is sent to the provider (never mutated, retries resend it)
    RawCompletion      - the untrusted provider payload, before validation
    AttemptOutcome     - Success(text) | Timeout | TransportError | MalformedResponse
    SummaryResult      - summary text + ordered takeaway lines
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CompletionRequest(BaseModel):
    """One chat-completion request. Frozen: a retry resends this exact object."""

    model_config = ConfigDict(frozen=True)

    system_prompt: str
    user_content: str
    model_id: str
    temperature: float = 0.4

    def to_payload(self) -> Dict[str, Any]:
        """Message-based request body understood by the provider."""
        return {
            "model": self.model_id,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": self.user_content},
            ],
            "temperature": self.temperature,
        }


class RawCompletion(BaseModel):
    """
    Whatever the provider sent back.

    `payload` is the decoded JSON body, or the raw text when the body was not
    JSON. Nothing about its shape is guaranteed.
    """

    model_config = ConfigDict(frozen=True)

    payload: Any = None
    status_code: Optional[int] = None


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"
    MALFORMED_RESPONSE = "malformed_response"


class AttemptOutcome(BaseModel):
    """Result of exactly one attempt. Failures are data, never exceptions."""

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    text: Optional[str] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def success(cls, text: str) -> "AttemptOutcome":
        return cls(kind=OutcomeKind.SUCCESS, text=text)

    @classmethod
    def timeout(cls, detail: Optional[str] = None) -> "AttemptOutcome":
        return cls(kind=OutcomeKind.TIMEOUT, detail=detail)

    @classmethod
    def transport_error(cls, detail: Optional[str] = None) -> "AttemptOutcome":
        return cls(kind=OutcomeKind.TRANSPORT_ERROR, detail=detail)

    @classmethod
    def malformed(cls, detail: Optional[str] = None) -> "AttemptOutcome":
        return cls(kind=OutcomeKind.MALFORMED_RESPONSE, detail=detail)


class SummaryResult(BaseModel):
    """
    What:  Structured summary extracted from generated text.
    Who:   Built by the output segmenter; returned as `data` by POST /api/summarize.

    Serialized with camelCase keys (`summaryText`) to match the HTTP contract.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    summary_text: str = Field(alias="summaryText", description="Summary before the takeaways heading")
    takeaways: List[str] = Field(
        default_factory=list,
        description="Takeaway lines in source order, trimmed, empties dropped",
    )

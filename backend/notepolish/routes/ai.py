"""
NotePolish Backend - AI Route Handlers
========================================

What:  POST /api/beautify and POST /api/summarize.
How:   Thin handlers: authenticate, hand the body field to the NotesPipeline,
       wrap the result. Failures propagate as NotePolishError subclasses and
       are rendered by the global handlers in main.py.

    POST /api/beautify   {content} → 200 {result}
    POST /api/summarize  {text}    → 200 {success: true, data: {summaryText, takeaways}}
    400 on blank input (no provider call), 401 without token, 500 on upstream failure
"""

import logging

from fastapi import APIRouter

from notepolish.middleware.auth import CurrentUserId
from notepolish.schemas.note import (
    BeautifyRequest,
    BeautifyResponse,
    ErrorResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from notepolish.services.pipeline import notes_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["AI"])

_ERRORS = {
    400: {"description": "Missing or blank input", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    500: {"description": "Completion provider failed", "model": ErrorResponse},
}


@router.post(
    "/beautify",
    response_model=BeautifyResponse,
    responses=_ERRORS,
    summary="Reformat raw class notes",
)
async def beautify_notes(body: BeautifyRequest, user_id: CurrentUserId) -> BeautifyResponse:
    """One bounded attempt; the generated text is returned verbatim."""
    logger.info("Beautify requested by user %s", user_id)
    result = await notes_pipeline.beautify(body.content)
    return BeautifyResponse(result=result)


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses=_ERRORS,
    summary="Summarize notes into a summary and takeaways",
)
async def summarize_notes(body: SummarizeRequest, user_id: CurrentUserId) -> SummarizeResponse:
    """Up to two bounded attempts, then the output is segmented into takeaways."""
    logger.info("Summarize requested by user %s", user_id)
    summary = await notes_pipeline.summarize(body.text)
    return SummarizeResponse(data=summary)

"""
NotePolish Backend - Notes Route Handlers
===========================================

What:  POST /api/save (persist a processed note) and GET /api/notes (list the
       caller's notes, newest first).
How:   Extract the body / identity, delegate to NoteService, wrap in
       `{success, data}`.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notepolish.database import get_db_session
from notepolish.middleware.auth import CurrentUserId
from notepolish.schemas.note import (
    ErrorResponse,
    NoteListResponse,
    SaveNoteRequest,
    SaveNoteResponse,
)
from notepolish.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.post(
    "/save",
    status_code=201,
    response_model=SaveNoteResponse,
    responses={
        400: {"description": "Missing note fields", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Save a processed note",
)
async def save_note(
    body: SaveNoteRequest,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db_session),
) -> SaveNoteResponse:
    note = await note_service.save_note(db=db, user_id=user_id, payload=body)
    return SaveNoteResponse(data=note)


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List the caller's saved notes, newest first",
)
async def list_notes(
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    notes = await note_service.list_notes(db=db, user_id=user_id)
    return NoteListResponse(data=notes)

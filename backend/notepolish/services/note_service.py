"""
NotePolish Backend - Note Service (Saved Notes)
=================================================

What:  Persists processed notes and lists them back for their owner.
How:   Async SQLAlchemy against the `notes` table; every query is scoped to
       the authenticated user's id.
Who:   Called by routes/notes.py.

Design Decision:
    NoteService is stateless: it receives the db session for each call, so a
    single module-level instance serves all requests.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from notepolish.exceptions import DatabaseError, ValidationError
from notepolish.models.note import Note
from notepolish.schemas.note import NoteResponse, SaveNoteRequest

logger = logging.getLogger(__name__)


def _to_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        user_id=note.user_id,
        raw_text=note.raw_text,
        beautified_text=note.beautified_text,
        summary_text=note.summary_text,
        takeaways=list(note.takeaways),
        created_at=note.created_at,
    )


class NoteService:
    """
    Business logic layer for saved notes.

    Responsibilities:
        - save_note(): validate the four fields and insert a Note
        - list_notes(): the user's notes, newest first
    """

    async def save_note(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        payload: SaveNoteRequest,
    ) -> NoteResponse:
        """
        Store one processed note for `user_id`.

        Raises:
            ValidationError: a text field is missing or blank, or takeaways is absent
            DatabaseError: the insert failed
        """
        text_fields = (payload.raw_text, payload.beautified_text, payload.summary_text)
        if not all(text_fields) or payload.takeaways is None:
            raise ValidationError(message="Missing required note fields.")

        note = Note(
            id=uuid.uuid4(),
            user_id=user_id,
            raw_text=payload.raw_text,
            beautified_text=payload.beautified_text,
            summary_text=payload.summary_text,
            takeaways=list(payload.takeaways),
            created_at=datetime.now(timezone.utc),
        )
        try:
            db.add(note)
            await db.flush()
        except Exception as e:
            logger.error("Failed to save note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to save note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note %s saved for user %s", note.id, user_id)
        return _to_response(note)

    async def list_notes(self, db: AsyncSession, user_id: uuid.UUID) -> List[NoteResponse]:
        """
        Query plan:
            SELECT * FROM notes WHERE user_id = :uid ORDER BY created_at DESC
            → idx_notes_user_created_at
        """
        try:
            result = await db.execute(
                select(Note)
                .where(Note.user_id == user_id)
                .order_by(desc(Note.created_at))
            )
            notes = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [_to_response(note) for note in notes]


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()

"""
NotePolish Backend - Note SQLAlchemy Model
============================================

What:  ORM model for the `notes` table: one processed note owned by one user.
Who:   Written by NoteService.save_note(), read by NoteService.list_notes().

Table Design:
    - raw_text / beautified_text / summary_text: TEXT, no length limit
    - takeaways: JSON array of strings, order preserved
    - user_id: owning user; every query filters on it
    - created_at: UTC with timezone; listing is newest first

    Composite index (user_id, created_at DESC) serves the only listing query:
    "this user's notes, newest first".
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, ForeignKey, Index, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from notepolish.database import Base


class Note(Base):
    """A saved note: original text, beautified text, summary and takeaways."""

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning user",
    )

    raw_text: Mapped[str] = mapped_column(Text, nullable=False, comment="Notes as typed by the user")
    beautified_text: Mapped[str] = mapped_column(
        Text, nullable=False, comment="Reformatted notes returned by beautify"
    )
    summary_text: Mapped[str] = mapped_column(
        Text, nullable=False, comment="Summary returned by summarize"
    )
    takeaways: Mapped[List[str]] = mapped_column(
        JSON, nullable=False, default=list, comment="Ordered takeaway lines"
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was saved (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_user_created_at", "user_id", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, user_id={self.user_id}, created_at='{self.created_at}')>"

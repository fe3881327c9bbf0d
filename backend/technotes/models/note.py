"""
TechNotes Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - user_id: Non-owning reference to users.id. A note never owns its user;
      the reverse guard (no deleting a user with notes) lives in UserService.
      ON DELETE RESTRICT backs that guard at the storage level.
    - title: UNIQUE across all notes, enforced by the database as well as by
      the service pre-check
    - completed: Ticket state toggled through PATCH /notes
    - created_at index: Listing is ordered by creation time
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy import text as sql_text
from sqlalchemy.orm import Mapped, mapped_column

from technotes.database import Base


class Note(Base):
    """
    Represents a note (ticket) assigned to a user.

    Lifecycle:
        1. Created by POST /notes after the title uniqueness check
        2. Replaced wholesale by PATCH /notes
        3. Deleted unconditionally by DELETE /notes
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        comment="User the note is assigned to",
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Note title, unique across all notes",
    )

    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=sql_text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )

    # Touched on every PATCH
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"completed={self.completed})>"
        )

"""
TechNotes Backend — Note Service (Note Handler)
=================================================

What:  Business rules for the note lifecycle: list, create, update, delete.
Why:   Encapsulates validation and the title-uniqueness rule, independent of HTTP.
How:   Same validate → check → single write sequence as UserService.
Who:   Called by the /notes routes; calls UserService for user lookups.

Listing:
    Every note is returned with the username of its assigned user. The
    usernames are resolved with ONE batched query through
    UserService.usernames_by_ids(), not one lookup per note.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.exceptions import (
    ConflictError,
    DatabaseError,
    DataError,
    NotFoundError,
    TechNotesError,
    ValidationError,
)
from technotes.models.note import Note
from technotes.schemas.note import NoteResponse
from technotes.services.persistence import coerce_id, commit_or_conflict
from technotes.services.user_service import user_service

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    NoteService is stateless; it receives the db session for each call.
    """

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        Return every note enriched with its assigned user's username.

        Query plan:
            SELECT * FROM notes ORDER BY created_at
            SELECT id, username FROM users WHERE id IN (...)

        Raises:
            NotFoundError: No notes exist (→ 404)
        """
        try:
            result = await db.execute(select(Note).order_by(Note.created_at))
            notes = list(result.scalars().all())
            if not notes:
                raise NotFoundError("No notes found", resource="note")

            usernames = await user_service.usernames_by_ids(
                db, (note.user_id for note in notes)
            )
        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [
            NoteResponse(
                id=note.id,
                user=note.user_id,
                username=usernames.get(note.user_id),
                title=note.title,
                text=note.text,
                completed=note.completed,
                created_at=note.created_at,
                updated_at=note.updated_at,
            )
            for note in notes
        ]

    async def create_note(
        self,
        db: AsyncSession,
        user: Optional[str],
        title: Optional[str],
        text: Optional[str],
    ) -> str:
        """
        Create a note assigned to an existing user.

        Raises:
            ValidationError: Missing field (→ 404) or unknown user (→ 400)
            ConflictError: Title already used by another note (→ 409)
            DataError: The store returned no record (→ 404)
        """
        if not user or not title or not text:
            raise ValidationError("All fields are required", status_code=404)

        try:
            owner = await user_service.get_user(db, user)
            if owner is None:
                raise ValidationError("User not found", field="user")

            if await self._find_by_title(db, title) is not None:
                raise ConflictError("Duplicate note title", context={"title": title})

            note = Note(user_id=owner.id, title=title, text=text)
            db.add(note)
            await commit_or_conflict(db, "Duplicate note title", context={"title": title})
        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if note.id is None:
            raise DataError("Invalid note data received")

        logger.info("Note created: '%s' (%s) for user %s", note.title, note.id, owner.username)
        return "New note created"

    async def update_note(
        self,
        db: AsyncSession,
        note_id: Optional[str],
        user: Optional[str],
        title: Optional[str],
        text: Optional[str],
        completed: Optional[bool],
    ) -> str:
        """
        Replace a note's fields. A note may keep its own title.

        Raises:
            ValidationError: Missing field, non-boolean completed, unknown user (→ 400)
            NotFoundError: No note with that id (→ 400)
            ConflictError: Another note already has the title (→ 409)
        """
        if (
            not note_id
            or not user
            or not title
            or not text
            or not isinstance(completed, bool)
        ):
            raise ValidationError("All fields are required")

        try:
            note = await self.get_note(db, note_id)
            if note is None:
                raise NotFoundError("Note not found", resource="note",
                                    resource_id=note_id, status_code=400)

            owner = await user_service.get_user(db, user)
            if owner is None:
                raise ValidationError("User not found", field="user")

            duplicate = await self._find_by_title(db, title)
            if duplicate is not None and duplicate.id != note.id:
                raise ConflictError("Duplicate note title", context={"title": title})

            note.user_id = owner.id
            note.title = title
            note.text = text
            note.completed = completed

            await commit_or_conflict(db, "Duplicate note title", context={"title": title})
        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(context={"note_id": note_id})

        logger.info("Note updated: '%s' (%s)", note.title, note.id)
        return f"{note.title} updated"

    async def delete_note(self, db: AsyncSession, note_id: Optional[str]) -> str:
        """
        Delete a note by id.

        Returns:
            Confirmation, e.g. "Note T1 with ID <uuid> deleted"

        Raises:
            ValidationError: No id supplied (→ 400)
            NotFoundError: No note with that id (→ 400)
        """
        if not note_id:
            raise ValidationError("Note ID is required", field="id")

        try:
            note = await self.get_note(db, note_id)
            if note is None:
                raise NotFoundError("Note not found", resource="note",
                                    resource_id=note_id, status_code=400)

            title, deleted_id = note.title, note.id
            await db.delete(note)
            await db.commit()
        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(context={"note_id": note_id})

        logger.info("Note deleted: '%s' (%s)", title, deleted_id)
        return f"Note {title} with ID {deleted_id} deleted"

    async def get_note(self, db: AsyncSession, note_id: Optional[str]) -> Optional[Note]:
        """Find a note by id; None for unknown or malformed ids."""
        nid = coerce_id(note_id)
        if nid is None:
            return None
        return await db.get(Note, nid)

    async def _find_by_title(self, db: AsyncSession, title: str) -> Optional[Note]:
        result = await db.execute(select(Note).where(Note.title == title))
        return result.scalar_one_or_none()


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()

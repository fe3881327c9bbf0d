"""
TechNotes Backend — Persistence Helpers
=========================================

What:  Small helpers shared by UserService and NoteService for talking to the
       database: id coercion and the commit step that turns storage-level
       constraint violations into application errors.

Why commit here instead of in get_db_session:
    The UNIQUE constraints on users.username and notes.title are the real
    guard against two concurrent requests both passing the duplicate
    pre-check. The violation only shows up when the write is flushed, so the
    service must commit itself to translate it into a ConflictError with the
    right message.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


def coerce_id(value: Optional[str]) -> Optional[uuid.UUID]:
    """
    Parse a client-supplied id. Returns None for anything that is not a UUID,
    since such an id cannot match a stored record.
    """
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


async def commit_or_conflict(
    db: AsyncSession,
    conflict_message: str,
    conflict_status: Optional[int] = None,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Commit the pending write.

    Raises:
        ConflictError: The database rejected the write with a constraint
            violation (duplicate key, restricted foreign key).
        DatabaseError: Any other database failure.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Constraint violation on commit: %s", conflict_message)
        ctx = dict(context or {})
        ctx["constraint"] = type(e.orig).__name__ if e.orig is not None else "IntegrityError"
        raise ConflictError(conflict_message, context=ctx, status_code=conflict_status)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Database error on commit: %s", str(e), exc_info=True)
        raise DatabaseError(context={"error_type": type(e).__name__, **(context or {})})

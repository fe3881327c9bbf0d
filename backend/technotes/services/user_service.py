"""
TechNotes Backend — User Service (User Handler)
=================================================

What:  Business rules for the user lifecycle: list, signup, update, delete.
Why:   Keeps validation, uniqueness and ownership rules out of the routes.
How:   Each operation is validate → check uniqueness/ownership → single write.
Who:   Called by the /users routes and by NoteService (username lookup).

Uniqueness:
    The duplicate-username pre-check gives a friendly 409 in the common case.
    Two concurrent signups can still both pass it; the UNIQUE constraint on
    users.username then rejects the second commit, and commit_or_conflict()
    reports it as the same ConflictError.

Password hashing:
    bcrypt is CPU-bound, so hashing runs in a worker thread to keep the event
    loop free for other requests.
"""

import asyncio
import logging
import uuid
from typing import Dict, Iterable, List, Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.config import settings
from technotes.exceptions import (
    ConflictError,
    DatabaseError,
    DataError,
    NotFoundError,
    TechNotesError,
    ValidationError,
)
from technotes.models.note import Note
from technotes.models.user import User
from technotes.schemas.user import UserResponse
from technotes.services.persistence import coerce_id, commit_or_conflict

logger = logging.getLogger(__name__)


async def hash_password(plaintext: str) -> str:
    """Hash a plaintext password with bcrypt off the event loop."""
    try:
        hashed = await asyncio.to_thread(
            bcrypt.hashpw,
            plaintext.encode("utf-8"),
            bcrypt.gensalt(rounds=settings.bcrypt_rounds),
        )
    except ValueError:
        # bcrypt rejects inputs longer than 72 bytes
        raise ValidationError("Password is too long", field="password")
    return hashed.decode("utf-8")


def _valid_roles(roles: object) -> bool:
    return isinstance(roles, list) and len(roles) > 0 and all(
        isinstance(role, str) and role for role in roles
    )


class UserService:
    """
    Business logic layer for user operations.

    Responsibilities:
        - list_users(): All users, password projected out
        - create_user(): Signup with duplicate check and password hashing
        - update_user(): Wholesale replace, own username exempt from duplicate check
        - delete_user(): Ownership guard, then delete
        - get_user() / usernames_by_ids(): Lookups used by NoteService

    Error Handling Strategy:
        Application exceptions propagate as-is. Unexpected SQLAlchemy errors
        are wrapped in DatabaseError so no driver detail reaches the client.
    """

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        """
        Return every user without the password hash.

        Raises:
            NotFoundError: No users exist (→ 404)
        """
        try:
            result = await db.execute(select(User).order_by(User.created_at))
            users = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )

        if not users:
            raise NotFoundError("No users found", resource="user")

        return [UserResponse.model_validate(user) for user in users]

    async def create_user(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
        roles: Optional[List[str]],
    ) -> str:
        """
        Create a user after validating input and checking the username is free.

        Returns:
            Status message, e.g. "New user alice created"

        Raises:
            ValidationError: Missing field or empty roles (→ 404)
            ConflictError: Username already taken (→ 409)
            DataError: The store returned no record (→ 404)
        """
        if not username or not password or not _valid_roles(roles):
            raise ValidationError("All fields are required", status_code=404)

        try:
            if await self._find_by_username(db, username) is not None:
                raise ConflictError("Duplicate username", context={"username": username})

            user = User(
                username=username,
                password=await hash_password(password),
                roles=list(roles),
            )
            db.add(user)
            await commit_or_conflict(db, "Duplicate username", context={"username": username})
        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user.id is None:
            raise DataError("Invalid user data received")

        logger.info("User created: %s (%s)", user.username, user.id)
        return f"New user {user.username} created"

    async def update_user(
        self,
        db: AsyncSession,
        user_id: Optional[str],
        username: Optional[str],
        roles: Optional[List[str]],
        active: Optional[bool],
        password: Optional[str] = None,
    ) -> str:
        """
        Replace a user's fields. The password hash is only replaced when a
        new plaintext password is supplied.

        Raises:
            ValidationError: Missing field, empty roles or non-boolean active (→ 400)
            NotFoundError: No user with that id (→ 400)
            ConflictError: Another user already has the username (→ 409)
        """
        if (
            not user_id
            or not username
            or not _valid_roles(roles)
            or not isinstance(active, bool)
        ):
            raise ValidationError("All fields are required")

        try:
            user = await self.get_user(db, user_id)
            if user is None:
                raise NotFoundError("User not found", resource="user",
                                    resource_id=user_id, status_code=400)

            # A user may keep its own username
            duplicate = await self._find_by_username(db, username)
            if duplicate is not None and duplicate.id != user.id:
                raise ConflictError("Duplicate username", context={"username": username})

            user.username = username
            user.roles = list(roles)
            user.active = active
            if password:
                user.password = await hash_password(password)

            await commit_or_conflict(db, "Duplicate username", context={"username": username})
        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(context={"user_id": user_id})

        logger.info("User updated: %s (%s)", user.username, user.id)
        return f"{user.username} updated"

    async def delete_user(self, db: AsyncSession, user_id: Optional[str]) -> str:
        """
        Delete a user that has no notes assigned.

        Returns:
            Confirmation, e.g. "Username alice with ID <uuid> deleted"

        Raises:
            ValidationError: No id supplied (→ 400)
            ConflictError: The user still has notes (→ 400)
            NotFoundError: No user with that id (→ 400)
        """
        if not user_id:
            raise ValidationError("User ID is required", field="id")

        try:
            uid = coerce_id(user_id)
            if uid is not None and await self._has_notes(db, uid):
                raise ConflictError(
                    "User has assigned notes",
                    context={"user_id": user_id},
                    status_code=400,
                )

            user = await self.get_user(db, user_id)
            if user is None:
                raise NotFoundError("User not found", resource="user",
                                    resource_id=user_id, status_code=400)

            username, deleted_id = user.username, user.id
            await db.delete(user)
            # RESTRICT on notes.user_id catches a note assigned concurrently
            await commit_or_conflict(
                db, "User has assigned notes", conflict_status=400,
                context={"user_id": user_id},
            )
        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(context={"user_id": user_id})

        logger.info("User deleted: %s (%s)", username, deleted_id)
        return f"Username {username} with ID {deleted_id} deleted"

    # ── Lookups ───────────────────────────────────────────────────────────

    async def get_user(self, db: AsyncSession, user_id: Optional[str]) -> Optional[User]:
        """Find a user by id; None for unknown or malformed ids."""
        uid = coerce_id(user_id)
        if uid is None:
            return None
        return await db.get(User, uid)

    async def usernames_by_ids(
        self, db: AsyncSession, user_ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, str]:
        """
        Resolve many user ids to usernames with a single query.

        What:    Batched lookup used by NoteService.list_notes().
        Why:     One round trip regardless of how many notes are listed.
        """
        ids = set(user_ids)
        if not ids:
            return {}
        result = await db.execute(
            select(User.id, User.username).where(User.id.in_(ids))
        )
        return {row.id: row.username for row in result.all()}

    async def _find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def _has_notes(self, db: AsyncSession, user_id: uuid.UUID) -> bool:
        result = await db.execute(
            select(Note.id).where(Note.user_id == user_id).limit(1)
        )
        return result.first() is not None


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()

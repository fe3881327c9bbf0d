"""
TechNotes Backend — User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by UserService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: Non-sequential, globally unique
    - username: UNIQUE at the storage level, so two concurrent signups with the
      same name cannot both commit even if both pass the service pre-check
    - password: bcrypt hash only; plaintext never reaches this table
    - roles: JSON array of role tags (e.g. ["Employee", "Manager"]); never empty
    - active: soft on/off switch managed through PATCH /users
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, Boolean, DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from technotes.database import Base


class User(Base):
    """
    Represents an application user.

    Lifecycle:
        1. Created by POST /users after the username uniqueness check
        2. Replaced wholesale by PATCH /users (password only when supplied)
        3. Deleted by DELETE /users once no note references it
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="Login name, unique across all users",
    )

    password: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="bcrypt hash of the user's password",
    )

    roles: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: ["Employee"],
        comment="Non-empty list of role tags",
    )

    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', active={self.active})>"

"""
TechNotes Backend — User Request/Response Schemas
===================================================

What:  Pydantic models for the /users API contract.
How:   Request fields are all Optional so that a missing field reaches the
       service, which answers with the operation's own "All fields are
       required" error and status code. Types are strict: a field that is
       present but of the wrong JSON type (e.g. `active: "yes"`) is rejected
       by FastAPI's request validation and rendered as a 400.

Security:
    UserResponse has no password field, so a hash can never be serialized
    into a list response even if a caller passes the ORM object straight in.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreateRequest(BaseModel):
    """Body of POST /users."""
    username: Optional[StrictStr] = Field(default=None, description="Unique login name")
    password: Optional[StrictStr] = Field(default=None, description="Plaintext password (hashed before storage)")
    roles: Optional[List[StrictStr]] = Field(default=None, description="Non-empty list of role tags")


class UserUpdateRequest(BaseModel):
    """Body of PATCH /users. `password` is optional; omit it to keep the current hash."""
    id: Optional[StrictStr] = Field(default=None, description="ID of the user to update")
    username: Optional[StrictStr] = None
    roles: Optional[List[StrictStr]] = None
    active: Optional[StrictBool] = None
    password: Optional[StrictStr] = None


class UserDeleteRequest(BaseModel):
    """Body of DELETE /users."""
    id: Optional[StrictStr] = Field(default=None, description="ID of the user to delete")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """
    What:  Lean projection of a user record (password omitted).
    Who:   Returned as array items by GET /users.
    """
    id: uuid.UUID = Field(description="Unique user identifier")
    username: str
    roles: List[str]
    active: bool

    model_config = {"from_attributes": True}

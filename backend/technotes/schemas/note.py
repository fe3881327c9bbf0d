"""
TechNotes Backend — Note Request/Response Schemas
===================================================

What:  Pydantic models for the /notes API contract.
How:   Same conventions as the user schemas: Optional strict request fields,
       presence checked by NoteService, wrong JSON types rejected with 400.

Note on naming:
    The JSON field `user` carries the owning user's id. The ORM column is
    `user_id`; NoteService translates between the two.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreateRequest(BaseModel):
    """Body of POST /notes."""
    user: Optional[StrictStr] = Field(default=None, description="ID of the assigned user")
    title: Optional[StrictStr] = Field(default=None, description="Unique note title")
    text: Optional[StrictStr] = Field(default=None, description="Note body")


class NoteUpdateRequest(BaseModel):
    """Body of PATCH /notes. Every field is required."""
    id: Optional[StrictStr] = Field(default=None, description="ID of the note to update")
    user: Optional[StrictStr] = None
    title: Optional[StrictStr] = None
    text: Optional[StrictStr] = None
    completed: Optional[StrictBool] = None


class NoteDeleteRequest(BaseModel):
    """Body of DELETE /notes."""
    id: Optional[StrictStr] = Field(default=None, description="ID of the note to delete")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  A note enriched with the username of the user it is assigned to.
    Who:   Returned as array items by GET /notes.

    `username` is None only if the referenced user vanished between the two
    reads of the listing, which the ownership guard otherwise prevents.
    """
    id: uuid.UUID = Field(description="Unique note identifier")
    user: uuid.UUID = Field(description="ID of the assigned user")
    username: Optional[str] = Field(default=None, description="Username of the assigned user")
    title: str
    text: str
    completed: bool
    created_at: datetime
    updated_at: datetime

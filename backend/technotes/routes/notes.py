"""
TechNotes Backend — Note Route Handlers
=========================================

What:  GET/POST/PATCH/DELETE /notes.
How:   Same shape as /users: collection path, id in the JSON body,
       NoteService does the work.
Auth:  Bearer token required (BearerAuthMiddleware protects /notes).
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.database import get_db_session
from technotes.schemas.common import ErrorResponse, MessageResponse
from technotes.schemas.note import (
    NoteCreateRequest,
    NoteDeleteRequest,
    NoteResponse,
    NoteUpdateRequest,
)
from technotes.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={404: {"description": "No notes found", "model": ErrorResponse}},
    summary="List all notes with the assigned user's username",
)
async def get_all_notes(
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    return await note_service.list_notes(db)


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Assigned user does not exist", "model": ErrorResponse},
        404: {"description": "Missing fields", "model": ErrorResponse},
        409: {"description": "Duplicate note title", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_new_note(
    payload: Optional[NoteCreateRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    payload = payload or NoteCreateRequest()
    message = await note_service.create_note(
        db,
        user=payload.user,
        title=payload.title,
        text=payload.text,
    )
    return MessageResponse(message=message)


@router.patch(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or note not found", "model": ErrorResponse},
        409: {"description": "Duplicate note title", "model": ErrorResponse},
    },
    summary="Update a note",
)
async def update_note(
    payload: Optional[NoteUpdateRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    payload = payload or NoteUpdateRequest()
    message = await note_service.update_note(
        db,
        note_id=payload.id,
        user=payload.user,
        title=payload.title,
        text=payload.text,
        completed=payload.completed,
    )
    return MessageResponse(message=message)


@router.delete(
    "",
    response_model=str,
    responses={400: {"description": "Missing id or note not found", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    payload: Optional[NoteDeleteRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> str:
    payload = payload or NoteDeleteRequest()
    return await note_service.delete_note(db, note_id=payload.id)

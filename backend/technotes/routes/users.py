"""
TechNotes Backend — User Route Handlers
=========================================

What:  GET/POST/PATCH/DELETE /users.
How:   Every verb works on the collection path; the target id travels in the
       JSON body. Handlers delegate to UserService and return its message.
Auth:  Bearer token required (BearerAuthMiddleware protects /users).
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.database import get_db_session
from technotes.schemas.common import ErrorResponse, MessageResponse
from technotes.schemas.user import (
    UserCreateRequest,
    UserDeleteRequest,
    UserResponse,
    UserUpdateRequest,
)
from technotes.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    responses={404: {"description": "No users found", "model": ErrorResponse}},
    summary="List all users (password omitted)",
)
async def get_all_users(
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return await user_service.list_users(db)


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        404: {"description": "Missing fields", "model": ErrorResponse},
        409: {"description": "Duplicate username", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_new_user(
    payload: Optional[UserCreateRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Hashes the password and stores the user if the username is free."""
    payload = payload or UserCreateRequest()
    message = await user_service.create_user(
        db,
        username=payload.username,
        password=payload.password,
        roles=payload.roles,
    )
    return MessageResponse(message=message)


@router.patch(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or user not found", "model": ErrorResponse},
        409: {"description": "Duplicate username", "model": ErrorResponse},
    },
    summary="Update a user",
)
async def update_user(
    payload: Optional[UserUpdateRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Replaces username, roles and active flag. The password is re-hashed only
    when the body carries a new one.
    """
    payload = payload or UserUpdateRequest()
    message = await user_service.update_user(
        db,
        user_id=payload.id,
        username=payload.username,
        roles=payload.roles,
        active=payload.active,
        password=payload.password,
    )
    return MessageResponse(message=message)


@router.delete(
    "",
    response_model=str,
    responses={
        400: {"description": "Missing id, user not found, or user has notes", "model": ErrorResponse},
    },
    summary="Delete a user without assigned notes",
)
async def delete_user(
    payload: Optional[UserDeleteRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> str:
    payload = payload or UserDeleteRequest()
    return await user_service.delete_user(db, user_id=payload.id)

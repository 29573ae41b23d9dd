"""
Habit Tracker Backend — Habit Route Handlers
==============================================

What:  Habit create / list / update / delete.
How:   Thin handlers delegating to HabitService; every route here requires
       an authenticated caller (see middleware/auth.py).
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from habit_tracker.database import get_db_session
from habit_tracker.dependencies import current_account_id, get_habit_service
from habit_tracker.schemas.common import MAX_ID, ErrorResponse, MessageResponse
from habit_tracker.schemas.habit import (
    HabitCreateRequest,
    HabitResponse,
    HabitUpdateRequest,
)
from habit_tracker.services.habit_service import HabitService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/habits",
    tags=["Habits"],
    dependencies=[Depends(current_account_id)],
)


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Malformed body or unknown owning account", "model": ErrorResponse},
    },
    summary="Create a habit",
)
async def create_habit(
    payload: HabitCreateRequest,
    db: AsyncSession = Depends(get_db_session),
    service: HabitService = Depends(get_habit_service),
) -> MessageResponse:
    logger.info("Create habit request: owner=%s", payload.owner_id)
    return await service.create_habit(db, payload)


@router.get(
    "",
    response_model=List[HabitResponse],
    summary="List the habits of one account",
)
async def list_habits(
    user_id: int = Query(..., alias="userId", ge=1, le=MAX_ID, description="Owning account id"),
    status: Optional[str] = Query(default=None, max_length=50, description="Only habits with this status"),
    db: AsyncSession = Depends(get_db_session),
    service: HabitService = Depends(get_habit_service),
) -> List[HabitResponse]:
    return await service.list_habits(db, user_id=user_id, status=status)


@router.put(
    "/{habit_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Neither title nor status supplied", "model": ErrorResponse},
        404: {"description": "Habit not found", "model": ErrorResponse},
    },
    summary="Update a habit's title and/or status",
)
async def update_habit(
    payload: HabitUpdateRequest,
    habit_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
    service: HabitService = Depends(get_habit_service),
) -> MessageResponse:
    return await service.update_habit(db, habit_id, payload)


@router.delete(
    "/{habit_id}",
    response_model=MessageResponse,
    summary="Delete a habit (idempotent)",
)
async def delete_habit(
    habit_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_db_session),
    service: HabitService = Depends(get_habit_service),
) -> MessageResponse:
    """Returns 200 whether or not the habit existed."""
    deleted = await service.delete_habit(db, habit_id)
    logger.info("Delete habit request: habit=%s removed=%s", habit_id, deleted)
    return MessageResponse(message="Habit deleted successfully", id=habit_id)

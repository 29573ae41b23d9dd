"""
Habit Tracker Backend — Habit Service
=======================================

What:  Business logic for habit create / list / update / delete.
How:   Composes HabitRepository and AccountRepository (owner checks).
Who:   Called by the /api/habits routes.

Rules:
    - create: the owning account must exist (InvalidReferenceError otherwise)
    - list:   only habits of the requested owner are returned
    - update: only title and status change; missing habit → NotFoundError
    - delete: idempotent; deleting a missing habit is not an error
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from habit_tracker.exceptions import (
    DatabaseError,
    HabitTrackerError,
    InvalidReferenceError,
    NotFoundError,
    ValidationError,
)
from habit_tracker.models.habit import Habit
from habit_tracker.repositories.account_repository import AccountRepository
from habit_tracker.repositories.habit_repository import HabitRepository
from habit_tracker.schemas.common import MessageResponse
from habit_tracker.schemas.habit import (
    HabitCreateRequest,
    HabitResponse,
    HabitUpdateRequest,
)

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("title", "status")


def _to_response(habit: Habit) -> HabitResponse:
    return HabitResponse(
        id=habit.id,
        title=habit.title,
        start_date=habit.start_date,
        frequency=habit.frequency,
        status=habit.status,
        user_id=habit.user_id,
    )


class HabitService:
    """Habit operations over an injected HabitRepository/AccountRepository pair."""

    def __init__(self, habits: HabitRepository, accounts: AccountRepository):
        self.habits = habits
        self.accounts = accounts

    async def create_habit(
        self, db: AsyncSession, payload: HabitCreateRequest
    ) -> MessageResponse:
        """
        Persist a new habit for an existing account.

        start_date defaults to today's date (UTC) when the payload omits it.

        Raises:
            InvalidReferenceError: owning account does not exist
            DatabaseError: storage failure
        """
        owner_id = payload.owner_id
        try:
            if not await self.accounts.exists(db, owner_id):
                raise InvalidReferenceError("account", owner_id, field="user.id")

            habit = Habit(
                user_id=owner_id,
                title=payload.title,
                start_date=payload.start_date or datetime.now(timezone.utc).date(),
                frequency=payload.frequency,
                status=payload.status,
            )
            await self.habits.save(db, habit)
            logger.info("Habit %s created for account %s", habit.id, owner_id)

            return MessageResponse(message="Habit created successfully", id=habit.id)

        except HabitTrackerError:
            raise
        except IntegrityError:
            # FK violation: the owner vanished between the check and the insert
            raise InvalidReferenceError("account", owner_id, field="user.id")
        except SQLAlchemyError as e:
            logger.error("Database error creating habit: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the habit. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def list_habits(
        self,
        db: AsyncSession,
        user_id: int,
        status: Optional[str] = None,
    ) -> List[HabitResponse]:
        """Habits owned by `user_id` (optionally with a given status). Unknown owner → []."""
        try:
            habits = await self.habits.list(db, user_id=user_id, status=status)
        except SQLAlchemyError as e:
            logger.error("Database error listing habits: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve habits. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )
        return [_to_response(habit) for habit in habits]

    async def update_habit(
        self,
        db: AsyncSession,
        habit_id: int,
        payload: HabitUpdateRequest,
    ) -> MessageResponse:
        """
        Overwrite title and/or status of an existing habit.

        Fields absent (or null) in the payload keep their stored value;
        start_date, frequency and owner are never touched.

        Raises:
            ValidationError: payload carries neither title nor status
            NotFoundError: no habit with that ID
            DatabaseError: storage failure
        """
        changes = payload.changes()
        if not changes:
            raise ValidationError(
                message=f"Provide at least one of: {', '.join(MUTABLE_FIELDS)}",
                field="body",
            )

        try:
            habit = await self.habits.get(db, habit_id)
            if habit is None:
                raise NotFoundError(resource="habit", resource_id=habit_id)

            for field in MUTABLE_FIELDS:
                if field in changes:
                    setattr(habit, field, changes[field])

            await self.habits.save(db, habit)
            logger.info("Habit %s updated: %s", habit_id, sorted(changes))
            return MessageResponse(message="Habit updated successfully", id=habit_id)

        except HabitTrackerError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating habit %s: %s", habit_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the habit. Please try again.",
                context={"habit_id": habit_id, "error_type": type(e).__name__},
            )

    async def delete_habit(self, db: AsyncSession, habit_id: int) -> bool:
        """
        Hard-delete a habit.

        Returns:
            True if a row was removed, False if the habit did not exist.
        """
        try:
            deleted = await self.habits.delete(db, habit_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting habit %s: %s", habit_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the habit. Please try again.",
                context={"habit_id": habit_id, "error_type": type(e).__name__},
            )

        if deleted:
            logger.info("Habit %s deleted", habit_id)
        else:
            logger.info("Delete of habit %s: no such habit (nothing to do)", habit_id)
        return deleted

"""
Habit persistence.

list() always filters by owner; there is no unfiltered query.
"""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from habit_tracker.models.habit import Habit


class HabitRepository:
    """Data access for the `habits` table."""

    async def get(self, db: AsyncSession, habit_id: int) -> Optional[Habit]:
        result = await db.execute(select(Habit).where(Habit.id == habit_id))
        return result.scalar_one_or_none()

    async def save(self, db: AsyncSession, habit: Habit) -> Habit:
        db.add(habit)
        await db.flush()
        return habit

    async def delete(self, db: AsyncSession, habit_id: int) -> bool:
        result = await db.execute(delete(Habit).where(Habit.id == habit_id))
        return result.rowcount > 0

    async def list(
        self,
        db: AsyncSession,
        user_id: int,
        status: Optional[str] = None,
    ) -> List[Habit]:
        """
        Habits owned by `user_id`, oldest first.

        Query plan:
            SELECT * FROM habits WHERE user_id = :user_id ORDER BY id
            → uses idx_habits_user_id
        """
        query = select(Habit).where(Habit.user_id == user_id).order_by(Habit.id)
        if status is not None:
            query = query.where(Habit.status == status)
        result = await db.execute(query)
        return list(result.scalars().all())

"""
Account persistence: lookups by id and by (normalised) email.
"""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from habit_tracker.models.account import Account


class AccountRepository:
    """Data access for the `accounts` table."""

    async def get(self, db: AsyncSession, account_id: int) -> Optional[Account]:
        result = await db.execute(select(Account).where(Account.id == account_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[Account]:
        result = await db.execute(select(Account).where(Account.email == email))
        return result.scalar_one_or_none()

    async def exists(self, db: AsyncSession, account_id: int) -> bool:
        result = await db.execute(select(Account.id).where(Account.id == account_id))
        return result.scalar_one_or_none() is not None

    async def save(self, db: AsyncSession, account: Account) -> Account:
        db.add(account)
        await db.flush()  # Assigns the id without committing
        return account

    async def delete(self, db: AsyncSession, account_id: int) -> bool:
        result = await db.execute(delete(Account).where(Account.id == account_id))
        return result.rowcount > 0

    async def list(self, db: AsyncSession, email: Optional[str] = None) -> List[Account]:
        query = select(Account).order_by(Account.id)
        if email is not None:
            query = query.where(Account.email == email)
        result = await db.execute(query)
        return list(result.scalars().all())

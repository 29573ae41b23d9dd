"""
Habit Tracker Backend — Repository Tests
==========================================

What:  AccountRepository and HabitRepository against a real (SQLite) database.
How:   db_session fixture creates the schema per test and rolls back afterwards.
"""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from habit_tracker.models.account import Account
from habit_tracker.models.habit import Habit
from habit_tracker.repositories import AccountRepository, HabitRepository


async def _add_account(db, email="john@example.com"):
    return await AccountRepository().save(
        db, Account(name="John Doe", email=email, password_hash="x")
    )


async def _add_habit(db, user_id, title="Drink Water", status="Active"):
    return await HabitRepository().save(
        db,
        Habit(
            user_id=user_id,
            title=title,
            start_date=date(2026, 1, 5),
            frequency="Daily",
            status=status,
        ),
    )


class TestAccountRepository:

    def setup_method(self):
        self.repo = AccountRepository()

    @pytest.mark.asyncio
    async def test_save_assigns_id_and_lookups(self, db_session):
        account = await _add_account(db_session)

        assert account.id is not None
        assert (await self.repo.get(db_session, account.id)).email == "john@example.com"
        assert (await self.repo.get_by_email(db_session, "john@example.com")).id == account.id
        assert await self.repo.exists(db_session, account.id) is True
        assert await self.repo.exists(db_session, account.id + 100) is False
        assert await self.repo.get(db_session, account.id + 100) is None

    @pytest.mark.asyncio
    async def test_email_unique(self, db_session):
        await _add_account(db_session)
        with pytest.raises(IntegrityError):
            await _add_account(db_session)

    @pytest.mark.asyncio
    async def test_list_and_delete(self, db_session):
        first = await _add_account(db_session, "a@example.com")
        await _add_account(db_session, "b@example.com")

        assert [a.email for a in await self.repo.list(db_session)] == [
            "a@example.com",
            "b@example.com",
        ]
        assert len(await self.repo.list(db_session, email="b@example.com")) == 1

        assert await self.repo.delete(db_session, first.id) is True
        assert await self.repo.delete(db_session, first.id) is False


class TestHabitRepository:

    def setup_method(self):
        self.repo = HabitRepository()

    @pytest.mark.asyncio
    async def test_list_filters_by_owner_and_status(self, db_session):
        john = await _add_account(db_session, "john@example.com")
        jane = await _add_account(db_session, "jane@example.com")
        await _add_habit(db_session, john.id, "Drink Water")
        await _add_habit(db_session, john.id, "Stretch", status="Paused")
        await _add_habit(db_session, jane.id, "Run")

        johns = await self.repo.list(db_session, user_id=john.id)
        assert [h.title for h in johns] == ["Drink Water", "Stretch"]
        assert all(h.user_id == john.id for h in johns)

        paused = await self.repo.list(db_session, user_id=john.id, status="Paused")
        assert [h.title for h in paused] == ["Stretch"]

        assert await self.repo.list(db_session, user_id=jane.id + 100) == []

    @pytest.mark.asyncio
    async def test_get_and_delete(self, db_session):
        owner = await _add_account(db_session)
        habit = await _add_habit(db_session, owner.id)

        assert (await self.repo.get(db_session, habit.id)).title == "Drink Water"
        assert await self.repo.delete(db_session, habit.id) is True
        assert await self.repo.delete(db_session, habit.id) is False
        assert await self.repo.get(db_session, habit.id) is None

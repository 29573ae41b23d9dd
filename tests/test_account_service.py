"""
Habit Tracker Backend — Account Service Unit Tests
====================================================

What:  AccountService logic with mocked repositories (no real DB).

What we test:
    ✅ Registration hashes the password and returns the new id
    ✅ Duplicate email → ConflictError (pre-check and IntegrityError)
    ✅ Storage failures → DatabaseError
    ✅ Lookup of unknown id → NotFoundError; response carries no hash
    ✅ Update: full replace, optional password, email conflicts
    ✅ Login issues a token for the right account only
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from habit_tracker.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
)
from habit_tracker.models.account import Account
from habit_tracker.schemas.account import (
    AccountUpdateRequest,
    LoginRequest,
    RegisterRequest,
)
from habit_tracker.security import PasswordHasher, TokenService
from habit_tracker.services.account_service import AccountService


async def _assign_id(db, account):
    account.id = 1
    return account


def _account(hasher, account_id=1, email="john@example.com", password="pw123"):
    return Account(
        id=account_id,
        name="John Doe",
        email=email,
        password_hash=hasher.hash(password),
    )


class TestAccountServiceRegister:

    def setup_method(self):
        self.repo = MagicMock()
        self.repo.get_by_email = AsyncMock(return_value=None)
        self.repo.save = AsyncMock(side_effect=_assign_id)
        self.hasher = PasswordHasher()
        self.service = AccountService(
            accounts=self.repo,
            hasher=self.hasher,
            tokens=TokenService(secret_key="unit-test-secret"),
        )

    @pytest.mark.asyncio
    async def test_register_success(self, mock_db_session):
        payload = RegisterRequest(name="John Doe", email="John@Example.com", password="pw123")

        result = await self.service.register(mock_db_session, payload)

        assert result.message == "User registered successfully"
        assert result.id == 1
        saved = self.repo.save.await_args.args[1]
        assert saved.email == "john@example.com"
        assert saved.password_hash != "pw123"
        assert self.hasher.verify("pw123", saved.password_hash)

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, mock_db_session):
        self.repo.get_by_email = AsyncMock(return_value=_account(self.hasher))
        payload = RegisterRequest(name="Jane", email="john@example.com", password="other")

        with pytest.raises(ConflictError) as exc_info:
            await self.service.register(mock_db_session, payload)

        assert exc_info.value.status_code == 409
        self.repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_register_concurrent_duplicate(self, mock_db_session):
        self.repo.save = AsyncMock(
            side_effect=IntegrityError("INSERT INTO accounts", {}, Exception("UNIQUE"))
        )
        payload = RegisterRequest(name="John", email="john@example.com", password="pw")

        with pytest.raises(ConflictError):
            await self.service.register(mock_db_session, payload)

    @pytest.mark.asyncio
    async def test_register_storage_failure(self, mock_db_session):
        self.repo.save = AsyncMock(
            side_effect=OperationalError("INSERT INTO accounts", {}, Exception("down"))
        )
        payload = RegisterRequest(name="John", email="john@example.com", password="pw")

        with pytest.raises(DatabaseError):
            await self.service.register(mock_db_session, payload)


class TestAccountServiceLookupAndLogin:

    def setup_method(self):
        self.hasher = PasswordHasher()
        self.tokens = TokenService(secret_key="unit-test-secret")
        self.stored = _account(self.hasher, account_id=7)
        self.repo = MagicMock()
        self.repo.get = AsyncMock(return_value=self.stored)
        self.repo.get_by_email = AsyncMock(return_value=self.stored)
        self.service = AccountService(accounts=self.repo, hasher=self.hasher, tokens=self.tokens)

    @pytest.mark.asyncio
    async def test_get_account(self, mock_db_session):
        result = await self.service.get_account(mock_db_session, 7)
        assert result.id == 7
        assert result.email == "john@example.com"
        assert "password" not in result.model_dump()
        assert "password_hash" not in result.model_dump()

    @pytest.mark.asyncio
    async def test_get_account_not_found(self, mock_db_session):
        self.repo.get = AsyncMock(return_value=None)
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_account(mock_db_session, 999)
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_login_returns_token_for_account(self, mock_db_session):
        result = await self.service.login(
            mock_db_session, LoginRequest(email="john@example.com", password="pw123")
        )
        assert result.token_type == "bearer"
        assert result.expires_in == self.tokens.expires_in
        assert self.tokens.account_id_from(result.access_token) == 7

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, mock_db_session):
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            await self.service.login(
                mock_db_session, LoginRequest(email="john@example.com", password="nope")
            )

    @pytest.mark.asyncio
    async def test_authenticate_unknown_email(self, mock_db_session):
        self.repo.get_by_email = AsyncMock(return_value=None)
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            await self.service.authenticate(mock_db_session, "ghost@example.com", "pw123")


class TestAccountServiceUpdate:

    def setup_method(self):
        self.hasher = PasswordHasher()
        self.stored = _account(self.hasher, account_id=1)
        self.original_hash = self.stored.password_hash
        self.repo = MagicMock()
        self.repo.get = AsyncMock(return_value=self.stored)
        self.repo.get_by_email = AsyncMock(return_value=None)
        self.repo.save = AsyncMock(side_effect=lambda db, account: account)
        self.service = AccountService(
            accounts=self.repo,
            hasher=self.hasher,
            tokens=TokenService(secret_key="unit-test-secret"),
        )

    @pytest.mark.asyncio
    async def test_update_without_password_keeps_hash(self, mock_db_session):
        payload = AccountUpdateRequest(id=1, name="Johnny", email="johnny@example.com")

        result = await self.service.update_account(mock_db_session, payload)

        assert result.message == "User updated successfully"
        assert self.stored.name == "Johnny"
        assert self.stored.email == "johnny@example.com"
        assert self.stored.password_hash == self.original_hash

    @pytest.mark.asyncio
    async def test_update_with_password_rehashes(self, mock_db_session):
        payload = AccountUpdateRequest(
            id=1, name="John Doe", email="john@example.com", password="new-pw"
        )

        await self.service.update_account(mock_db_session, payload)

        assert self.stored.password_hash != self.original_hash
        assert self.hasher.verify("new-pw", self.stored.password_hash)
        # Unchanged email needs no uniqueness lookup
        self.repo.get_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_unknown_account(self, mock_db_session):
        self.repo.get = AsyncMock(return_value=None)
        payload = AccountUpdateRequest(id=99, name="X", email="x@example.com")

        with pytest.raises(NotFoundError):
            await self.service.update_account(mock_db_session, payload)
        self.repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_email_taken_by_other_account(self, mock_db_session):
        self.repo.get_by_email = AsyncMock(
            return_value=_account(self.hasher, account_id=2, email="jane@example.com")
        )
        payload = AccountUpdateRequest(id=1, name="John", email="jane@example.com")

        with pytest.raises(ConflictError):
            await self.service.update_account(mock_db_session, payload)
        assert self.stored.email == "john@example.com"

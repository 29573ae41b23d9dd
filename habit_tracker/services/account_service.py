"""
Habit Tracker Backend — Account Service
=========================================

What:  Business logic for registration, login and account lookup/update.
How:   Composes AccountRepository (persistence), PasswordHasher (credential
       hashing) and TokenService (bearer tokens), all injected at construction.
Who:   Called by the /api/register, /api/login and /api/user routes, and by
       AuthenticationMiddleware for Basic credentials.

Error translation:
    email already taken (pre-check or IntegrityError on flush) → ConflictError
    unknown account id                                          → NotFoundError
    wrong email/password                                        → AuthenticationError
    any other SQLAlchemyError                                   → DatabaseError
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from habit_tracker.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    HabitTrackerError,
    NotFoundError,
)
from habit_tracker.models.account import Account
from habit_tracker.repositories.account_repository import AccountRepository
from habit_tracker.schemas.account import (
    AccountResponse,
    AccountUpdateRequest,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from habit_tracker.schemas.common import MessageResponse
from habit_tracker.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


def _email_conflict(email: str) -> ConflictError:
    return ConflictError(
        message=f"An account with email '{email}' already exists",
        field="email",
    )


class AccountService:
    """
    Account operations. Stateless apart from its injected collaborators.

    Responsibilities:
        - register(): hash + persist a new account, rejecting duplicate emails
        - login(): verify credentials and issue a bearer token
        - authenticate(): verify credentials and return the account
        - get_account(): lookup with explicit not-found
        - update_account(): full replace of name/email, optional password change
    """

    def __init__(
        self,
        accounts: AccountRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.accounts = accounts
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, db: AsyncSession, payload: RegisterRequest) -> MessageResponse:
        """
        Create a new account.

        Workflow:
            1. Reject if the email is already registered (ConflictError)
            2. Hash the password (salted, one-way)
            3. Insert and flush; a concurrent duplicate surfaces here as
               IntegrityError and is reported as the same ConflictError

        Returns:
            MessageResponse with the new account id

        Raises:
            ConflictError: email already registered
            DatabaseError: any other storage failure
        """
        try:
            if await self.accounts.get_by_email(db, payload.email) is not None:
                logger.warning("Registration rejected: email already registered")
                raise _email_conflict(payload.email)

            account = Account(
                name=payload.name,
                email=payload.email,
                password_hash=self.hasher.hash(payload.password),
            )
            await self.accounts.save(db, account)
            logger.info("Account registered: id=%s", account.id)

            return MessageResponse(message="User registered successfully", id=account.id)

        except HabitTrackerError:
            raise
        except IntegrityError:
            logger.warning("Registration rejected on insert: email already registered")
            raise _email_conflict(payload.email)
        except SQLAlchemyError as e:
            logger.error("Database error during registration: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not register the account. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> Account:
        """
        Verify an email/password pair against the stored hash.

        Unknown email and wrong password raise the same error.
        """
        try:
            account = await self.accounts.get_by_email(db, email)
        except SQLAlchemyError as e:
            logger.error("Database error during authentication: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        if account is None or not self.hasher.verify(password, account.password_hash):
            logger.warning("Failed login attempt")
            raise AuthenticationError("Invalid email or password")
        return account

    async def login(self, db: AsyncSession, payload: LoginRequest) -> TokenResponse:
        account = await self.authenticate(db, payload.email, payload.password)
        logger.info("Account %s logged in", account.id)
        return TokenResponse(
            access_token=self.tokens.create_access_token(account.id, account.email),
            token_type="bearer",
            expires_in=self.tokens.expires_in,
        )

    async def get_account(self, db: AsyncSession, account_id: int) -> AccountResponse:
        """
        Retrieve a single account by ID.

        Raises:
            NotFoundError: no account with that ID (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        try:
            account = await self.accounts.get(db, account_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching account %s: %s", account_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the account. Please try again.",
                context={"account_id": account_id},
            )

        if account is None:
            raise NotFoundError(resource="account", resource_id=account_id)

        return AccountResponse(id=account.id, name=account.name, email=account.email)

    async def update_account(
        self, db: AsyncSession, payload: AccountUpdateRequest
    ) -> MessageResponse:
        """
        Replace an account's profile.

        name and email are overwritten with the payload values. The password
        hash is replaced only when the payload carries a password.

        Raises:
            NotFoundError: payload.id does not exist
            ConflictError: payload.email belongs to another account
            DatabaseError: any other storage failure
        """
        try:
            account = await self.accounts.get(db, payload.id)
            if account is None:
                raise NotFoundError(resource="account", resource_id=payload.id)

            if payload.email != account.email:
                other = await self.accounts.get_by_email(db, payload.email)
                if other is not None and other.id != account.id:
                    logger.warning("Account %s update rejected: email taken", account.id)
                    raise _email_conflict(payload.email)

            account.name = payload.name
            account.email = payload.email
            if payload.password is not None:
                account.password_hash = self.hasher.hash(payload.password)

            await self.accounts.save(db, account)
            logger.info(
                "Account %s updated (password changed: %s)",
                account.id,
                payload.password is not None,
            )
            return MessageResponse(message="User updated successfully", id=account.id)

        except HabitTrackerError:
            raise
        except IntegrityError:
            raise _email_conflict(payload.email)
        except SQLAlchemyError as e:
            logger.error("Database error updating account %s: %s", payload.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the account. Please try again.",
                context={"account_id": payload.id, "error_type": type(e).__name__},
            )

"""
Habit Tracker Backend — Account Route Handlers
================================================

What:  Registration, login, and account lookup/update.
How:   Validates the body with Pydantic, delegates to AccountService.
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from habit_tracker.database import get_db_session
from habit_tracker.dependencies import current_account_id, get_account_service
from habit_tracker.schemas.account import (
    AccountResponse,
    AccountUpdateRequest,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from habit_tracker.schemas.common import MAX_ID, ErrorResponse, MessageResponse
from habit_tracker.services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Accounts"])


@router.post(
    "/register",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Malformed body or email", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Public endpoint. The password is hashed before it is stored."""
    logger.info("Registration request received")
    return await service.register(db, payload)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Exchange email/password for a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
) -> TokenResponse:
    return await service.login(db, payload)


@router.get(
    "/user",
    response_model=AccountResponse,
    responses={404: {"description": "Account not found", "model": ErrorResponse}},
    summary="Get an account by id",
)
async def get_user(
    user_id: int = Query(..., alias="userId", ge=1, le=MAX_ID, description="Account id"),
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
    _caller: int = Depends(current_account_id),
) -> AccountResponse:
    return await service.get_account(db, user_id)


@router.put(
    "/user",
    response_model=MessageResponse,
    responses={
        404: {"description": "Account not found", "model": ErrorResponse},
        409: {"description": "Email already used by another account", "model": ErrorResponse},
    },
    summary="Replace an account's profile",
)
async def update_user(
    payload: AccountUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
    caller: int = Depends(current_account_id),
) -> MessageResponse:
    """
    Full replace: id, name and email are required and overwrite the stored
    values. password is optional and only changes the hash when supplied.

    Any authenticated caller may replace any account, including its email
    and password. Such cross-account updates are logged at WARNING.
    """
    if payload.id != caller:
        logger.warning("Account %s is updating account %s", caller, payload.id)
    return await service.update_account(db, payload)

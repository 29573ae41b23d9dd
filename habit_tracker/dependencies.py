"""
Habit Tracker Backend — Route Dependencies
============================================

Accessors for the components create_app() builds once at startup and
stores on app.state. Routes declare them with Depends(), so tests can
swap them through app.dependency_overrides.
"""

from fastapi import Request

from habit_tracker.exceptions import AuthenticationError
from habit_tracker.services.account_service import AccountService
from habit_tracker.services.habit_service import HabitService


def get_account_service(request: Request) -> AccountService:
    return request.app.state.account_service


def get_habit_service(request: Request) -> HabitService:
    return request.app.state.habit_service


def current_account_id(request: Request) -> int:
    """Id of the caller authenticated by AuthenticationMiddleware."""
    account_id = getattr(request.state, "account_id", None)
    if account_id is None:
        raise AuthenticationError("Authentication required")
    return account_id

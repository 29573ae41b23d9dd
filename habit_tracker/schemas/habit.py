"""
Habit Tracker Backend — Habit Schemas
=======================================

What:  Request/response models for habit CRUD.
How:   JSON keys are camelCase (startDate, userId) to stay compatible with
       existing clients; snake_case is accepted on input as well.

Owner reference on create:
    Existing clients send the owner nested, {"user": {"id": 1}}.
    A flat {"userId": 1} is accepted too; one of the two is required.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel

from habit_tracker.schemas.common import MAX_ID

CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    # Strip before length checks: a blank title fails min_length
    "str_strip_whitespace": True,
}


class AccountRef(BaseModel):
    """Embedded reference to the owning account."""
    id: int = Field(ge=1, le=MAX_ID)


class HabitCreateRequest(BaseModel):
    """Body of POST /api/habits."""
    title: str = Field(min_length=1, max_length=255)
    start_date: Optional[date] = Field(
        default=None,
        description="First tracked day (ISO date). Defaults to today (UTC).",
    )
    frequency: str = Field(default="Daily", min_length=1, max_length=50)
    status: str = Field(default="Active", min_length=1, max_length=50)
    user: Optional[AccountRef] = Field(default=None, description="Owning account")
    user_id: Optional[int] = Field(default=None, ge=1, le=MAX_ID, description="Owning account id (flat form)")

    model_config = CAMEL_CONFIG

    @model_validator(mode="after")
    def require_owner(self) -> "HabitCreateRequest":
        if self.user is None and self.user_id is None:
            raise ValueError("Habit owner is required: provide user.id or userId")
        if self.user is not None and self.user_id is not None and self.user.id != self.user_id:
            raise ValueError("user.id and userId disagree")
        return self

    @property
    def owner_id(self) -> int:
        return self.user.id if self.user is not None else self.user_id


class HabitUpdateRequest(BaseModel):
    """
    Body of PUT /api/habits/{id}.

    Only title and status are mutable; null/omitted fields are left as-is.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    status: Optional[str] = Field(default=None, min_length=1, max_length=50)

    model_config = CAMEL_CONFIG

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class HabitResponse(BaseModel):
    """One habit as returned by GET /api/habits."""
    id: int
    title: str
    start_date: date
    frequency: str
    status: str
    user_id: int

    model_config = {**CAMEL_CONFIG, "from_attributes": True}

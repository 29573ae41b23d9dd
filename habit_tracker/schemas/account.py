"""
Habit Tracker Backend — Account Schemas
=========================================

What:  Request/response models for registration, login and account lookup/update.
How:   EmailStr (email-validator) checks address syntax; passwords are
       accepted on input only and never appear in any response model.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from habit_tracker.schemas.common import MAX_ID

DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


def _normalise_email(v: str) -> str:
    return v.strip().lower()


class RegisterRequest(BaseModel):
    """Body of POST /api/register."""
    name: DisplayName = Field(description="Display name")
    email: EmailStr = Field(description="Unique login email")
    password: str = Field(min_length=1, max_length=1024, description="Plaintext password")

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return _normalise_email(v)


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    email: EmailStr
    password: str = Field(min_length=1, max_length=1024)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return _normalise_email(v)


class AccountUpdateRequest(BaseModel):
    """
    Body of PUT /api/user.

    Full replace of the profile: id, name and email are all required.
    password is optional; when omitted the stored hash is kept.
    """
    id: int = Field(ge=1, le=MAX_ID, description="Account to replace")
    name: DisplayName
    email: EmailStr
    password: Optional[str] = Field(default=None, min_length=1, max_length=1024)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return _normalise_email(v)


class AccountResponse(BaseModel):
    """Public view of an account. The password hash is never serialized."""
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Bearer token issued by POST /api/login."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")

"""
Habit Tracker Backend — Account SQLAlchemy Model
==================================================

What:  ORM model for the `accounts` table (registered users).
Who:   AccountRepository reads and writes it; Alembic mirrors it in 001.

Table Design:
    - Integer primary key assigned by the database
    - email: UNIQUE; stored normalised (trimmed, lower-case)
    - password_hash: passlib hash string (scheme + salt + digest), never plaintext
"""

from typing import List, TYPE_CHECKING

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from habit_tracker.database import Base

if TYPE_CHECKING:
    from habit_tracker.models.habit import Habit


class Account(Base):
    """
    A registered user identity with credentials.

    Lifecycle:
        1. Created by POST /api/register
        2. Replaced (name, email, optionally password) by PUT /api/user
        3. Never deleted through the API
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Login identifier, unique across accounts",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Salted one-way hash of the password",
    )

    habits: Mapped[List["Habit"]] = relationship(
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_accounts_email"),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email='{self.email}')>"

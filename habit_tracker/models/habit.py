"""
Habit Tracker Backend — Habit SQLAlchemy Model
================================================

What:  ORM model for the `habits` table.
Who:   HabitRepository reads and writes it; Alembic mirrors it in 001.

Table Design:
    - user_id: FK → accounts.id, NOT NULL, fixed at creation
    - frequency / status: free-text labels ("Daily", "Active", "Completed", ...)
    - start_date: calendar date, no time component

Index on user_id:
    Every list query filters by owner (GET /api/habits?userId=).
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from habit_tracker.database import Base

if TYPE_CHECKING:
    from habit_tracker.models.account import Account


class Habit(Base):
    """
    A tracked recurring activity owned by exactly one account.

    Mutable after creation: title, status. Everything else is write-once.
    Deletion is a hard delete.
    """

    __tablename__ = "habits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE", name="fk_habits_user_id_accounts"),
        nullable=False,
        comment="Owning account",
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First day the habit is tracked",
    )

    frequency: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="Daily",
        server_default=text("'Daily'"),
        comment="Free-text label, e.g. Daily, Weekly",
    )

    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="Active",
        server_default=text("'Active'"),
        comment="Free-text label, e.g. Active, Completed",
    )

    owner: Mapped["Account"] = relationship(back_populates="habits", lazy="raise")

    __table_args__ = (
        Index("idx_habits_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Habit(id={self.id}, user_id={self.user_id}, title='{self.title}')>"

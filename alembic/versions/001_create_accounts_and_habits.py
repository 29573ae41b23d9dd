"""Create accounts and habits tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Initial schema: `accounts` (unique email) and `habits` (FK → accounts).
Mirrors habit_tracker/models/account.py and habit_tracker/models/habit.py.

Rollback: downgrade() drops both tables (all data is lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False, comment="Display name"),
        sa.Column(
            "email",
            sa.String(255),
            nullable=False,
            comment="Login identifier, unique across accounts",
        ),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="Salted one-way hash of the password",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_accounts_email"),
    )

    op.create_table(
        "habits",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="Owning account"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column(
            "start_date",
            sa.Date(),
            nullable=False,
            comment="First day the habit is tracked",
        ),
        sa.Column(
            "frequency",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'Daily'"),
            comment="Free-text label, e.g. Daily, Weekly",
        ),
        sa.Column(
            "status",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'Active'"),
            comment="Free-text label, e.g. Active, Completed",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["accounts.id"],
            name="fk_habits_user_id_accounts",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Every list query filters by owner
    op.create_index("idx_habits_user_id", "habits", ["user_id"])


def downgrade() -> None:
    op.drop_index("idx_habits_user_id", table_name="habits")
    op.drop_table("habits")
    op.drop_table("accounts")

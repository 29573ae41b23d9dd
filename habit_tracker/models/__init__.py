"""
Habit Tracker Backend — ORM Models
====================================

Importing this package registers every table with Base.metadata
(used by Alembic autogenerate and by the test-suite's create_all).
"""

from habit_tracker.models.account import Account
from habit_tracker.models.habit import Habit

__all__ = ["Account", "Habit"]

"""
Habit Tracker Backend — Persistence Layer
===========================================

One repository per entity, each exposing the same small surface:

    get(db, id)       → record or None
    save(db, record)  → record (inserted or updated, flushed so ids are assigned)
    delete(db, id)    → True if a row was removed, False if none existed
    list(db, ...)     → records matching a filter

Repositories are stateless: the AsyncSession is passed in per call, so a
single instance is built at startup and shared by every request. They do
not translate SQLAlchemy errors; services do that.
"""

from habit_tracker.repositories.account_repository import AccountRepository
from habit_tracker.repositories.habit_repository import HabitRepository

__all__ = ["AccountRepository", "HabitRepository"]

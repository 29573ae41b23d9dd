"""
Habit Tracker Backend
=====================

Layered layout:

    ┌─────────────────────────────────────┐
    │   Middleware (request id, rate      │
    │   limit, access log, auth guard)    │
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Business Logic)      │  ← rules, error translation
    ├─────────────────────────────────────┤
    │   Repositories + Models (Data)      │  ← SQLAlchemy ORM
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

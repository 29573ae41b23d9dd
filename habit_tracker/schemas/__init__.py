"""
Habit Tracker Backend — Pydantic Request/Response Schemas
===========================================================

Schemas are separate from SQLAlchemy models: they define the wire contract
(camelCase JSON, no password hashes) independently of the table layout.
"""

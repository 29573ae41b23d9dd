"""
Habit Tracker Backend — Middleware Package
============================================

Cross-cutting concerns applied to every request.

Middleware Chain (request direction):
    Request → [CORS] → [Request ID] → [Rate Limit] → [Logging] → [Auth guard] → [GZip] → Route

    CORS sits outermost so error responses (401, 429) still carry CORS headers.

    1. Request ID:  correlation id for every log line and error body (429s included)
    2. Rate Limit:  reject abusive clients before any other work
    3. Logging:     one access line per request, including 401s from the guard
    4. Auth guard:  ROUTE_POLICIES lookup, credential check (auth.py)
"""

"""
Habit Tracker Backend — Access Policy Middleware
==================================================

What:  Per-request guard deciding whether a route needs an authenticated caller.
How:   A static route table (ROUTE_POLICIES) of {method, path pattern,
       requires_auth}. For protected routes the middleware accepts either
         Authorization: Bearer <token>            (issued by POST /api/login)
         Authorization: Basic <b64(email:pass)>   (checked against stored hashes)
       and records the caller on request.state.account_id.
Who:   Applied to every request via Starlette middleware (inside request-id
       and logging, so rejections are still traced and logged).

Two states per request:
    unauthenticated → only public routes (register, login, health, docs)
    authenticated   → every route

Paths matching no entry: anything under /api requires authentication;
everything else is public (and usually ends in the framework's 404).
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from habit_tracker.database import async_session_factory
from habit_tracker.exceptions import AuthenticationError, DatabaseError
from habit_tracker.middleware.request_id import request_id_var
from habit_tracker.security import parse_basic_credentials

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoutePolicy:
    """One row of the access table. `path` may contain {param} placeholders."""

    method: str
    path: str
    requires_auth: bool

    @property
    def pattern(self) -> Pattern[str]:
        return _compile(self.path)


def _compile(path: str) -> Pattern[str]:
    regex = re.sub(r"\{[^/]+\}", r"[^/]+", path.rstrip("/") or "/")
    return re.compile(f"^{regex}/?$")


ROUTE_POLICIES: Tuple[RoutePolicy, ...] = (
    RoutePolicy("POST", "/api/register", requires_auth=False),
    RoutePolicy("POST", "/api/login", requires_auth=False),
    RoutePolicy("GET", "/api/user", requires_auth=True),
    RoutePolicy("PUT", "/api/user", requires_auth=True),
    RoutePolicy("POST", "/api/habits", requires_auth=True),
    RoutePolicy("GET", "/api/habits", requires_auth=True),
    RoutePolicy("PUT", "/api/habits/{habit_id}", requires_auth=True),
    RoutePolicy("DELETE", "/api/habits/{habit_id}", requires_auth=True),
    RoutePolicy("GET", "/health", requires_auth=False),
    RoutePolicy("GET", "/docs", requires_auth=False),
    RoutePolicy("GET", "/redoc", requires_auth=False),
    RoutePolicy("GET", "/openapi.json", requires_auth=False),
)

_COMPILED = tuple((policy, policy.pattern) for policy in ROUTE_POLICIES)


def resolve_policy(method: str, path: str) -> Optional[RoutePolicy]:
    """Return the table entry for method+path, or None when nothing matches."""
    method = method.upper()
    for policy, pattern in _COMPILED:
        if policy.method == method and pattern.match(path):
            return policy
    return None


def requires_authentication(method: str, path: str) -> bool:
    # CORS preflight never carries credentials
    if method.upper() == "OPTIONS":
        return False
    policy = resolve_policy(method, path)
    if policy is not None:
        return policy.requires_auth
    return path == "/api" or path.startswith("/api/")


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Enforces ROUTE_POLICIES.

    Needs the AccountService (Basic credentials) and TokenService (bearer
    tokens) that create_app() stores on app.state.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.account_id = None

        if not requires_authentication(request.method, request.url.path):
            return await call_next(request)

        try:
            request.state.account_id = await self._authenticate(request)
        except AuthenticationError as exc:
            rid = request_id_var.get("")
            logger.warning(
                "[%s] Rejected %s %s: %s",
                rid,
                request.method,
                request.url.path,
                exc.message,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": exc.error_code,
                    "message": exc.message,
                    "request_id": rid,
                },
                headers={"WWW-Authenticate": 'Bearer, Basic realm="habits"'},
            )
        except DatabaseError as exc:
            rid = request_id_var.get("")
            logger.error("[%s] Database error during authentication: %s", rid, exc.context)
            return JSONResponse(
                status_code=500,
                content={
                    "error": exc.error_code,
                    "message": exc.message,
                    "request_id": rid,
                },
            )

        return await call_next(request)

    async def _authenticate(self, request: Request) -> int:
        header = request.headers.get("Authorization", "")
        scheme, _, credentials = header.partition(" ")
        scheme = scheme.lower()

        if not credentials.strip():
            raise AuthenticationError("Authentication required")

        if scheme == "bearer":
            tokens = request.app.state.token_service
            return tokens.account_id_from(credentials.strip())

        if scheme == "basic":
            email, password = parse_basic_credentials(credentials)
            account_service = request.app.state.account_service
            async with async_session_factory() as session:
                account = await account_service.authenticate(session, email, password)
            return account.id

        raise AuthenticationError("Unsupported authorization scheme")

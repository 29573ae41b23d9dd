"""
Habit Tracker Backend — Credential Hashing & Bearer Tokens
============================================================

What:  Password hashing (passlib) and access-token handling (python-jose).
Who:   AccountService hashes on register/update and verifies on login;
       AuthenticationMiddleware decodes bearer tokens and Basic headers.
When:  Both components are built once in create_app() and shared.

Hash format:
    passlib's modular-crypt string, e.g. "$pbkdf2-sha256$29000$<salt>$<digest>".
    The scheme, cost and salt travel inside the stored value, so changing
    settings.password_hash_scheme later does not invalidate existing rows.

Token format:
    HS256 JWT with claims {"sub": "<account id>", "email", "iat", "exp", "type": "access"}.
"""

import base64
import binascii
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from habit_tracker.config import settings
from habit_tracker.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    Salted one-way password transform.

    hash() never returns the same string twice for the same password
    (fresh salt each call); verify() recomputes with the stored salt.
    """

    def __init__(self, scheme: Optional[str] = None):
        self.scheme = scheme or settings.password_hash_scheme
        self._context = CryptContext(schemes=[self.scheme], deprecated="auto")

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Returns False (never raises) for malformed or foreign hash strings."""
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False


class TokenService:
    """Issues and decodes signed access tokens."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_minutes = expire_minutes or settings.access_token_expire_minutes

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return self.expire_minutes * 60

    def create_access_token(self, account_id: int, email: str) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(account_id),
            "email": email,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
            "type": "access",
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        Raises:
            AuthenticationError: bad signature, expired, wrong type, or no subject
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("Rejected bearer token: %s", e)
            raise AuthenticationError("Invalid or expired token")

        if payload.get("type") != "access" or not payload.get("sub"):
            raise AuthenticationError("Invalid or expired token")
        return payload

    def account_id_from(self, token: str) -> int:
        payload = self.decode(token)
        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            raise AuthenticationError("Invalid or expired token")


def parse_basic_credentials(encoded: str) -> Tuple[str, str]:
    """
    Decode the value of an "Authorization: Basic <...>" header.

    Returns:
        (email, password). The email is normalised like stored emails.

    Raises:
        AuthenticationError: not base64, not UTF-8, or no ':' separator
    """
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        raise AuthenticationError("Malformed Basic credentials")

    email, sep, password = decoded.partition(":")
    if not sep or not email:
        raise AuthenticationError("Malformed Basic credentials")
    return email.strip().lower(), password

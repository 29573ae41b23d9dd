"""
Habit Tracker Backend — Credential & Token Tests
==================================================

What we test:
    ✅ Hashes are salted and never equal the plaintext
    ✅ verify() accepts the right password, rejects others and bad hashes
    ✅ Bearer tokens round-trip; expired/foreign tokens are rejected
    ✅ Basic header parsing and its failure modes
"""

import base64
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from habit_tracker.exceptions import AuthenticationError
from habit_tracker.security import PasswordHasher, TokenService, parse_basic_credentials


def _basic(raw: str) -> str:
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


class TestPasswordHasher:

    def setup_method(self):
        self.hasher = PasswordHasher()

    def test_hash_is_not_plaintext(self):
        hashed = self.hasher.hash("pw123")
        assert hashed != "pw123"
        assert "pw123" not in hashed

    def test_same_password_hashes_differently(self):
        assert self.hasher.hash("pw123") != self.hasher.hash("pw123")

    def test_verify_round_trip(self):
        hashed = self.hasher.hash("pw123")
        assert self.hasher.verify("pw123", hashed) is True
        assert self.hasher.verify("pw124", hashed) is False

    def test_verify_malformed_hash_returns_false(self):
        assert self.hasher.verify("pw123", "not-a-hash") is False

    def test_default_scheme_from_settings(self):
        assert self.hasher.hash("x").startswith("$pbkdf2-sha256$")


class TestTokenService:

    def setup_method(self):
        self.tokens = TokenService(secret_key="unit-test-secret", expire_minutes=5)

    def test_expires_in_is_seconds(self):
        assert self.tokens.expires_in == 300

    def test_token_round_trip(self):
        token = self.tokens.create_access_token(42, "john@example.com")
        claims = self.tokens.decode(token)
        assert claims["sub"] == "42"
        assert claims["email"] == "john@example.com"
        assert self.tokens.account_id_from(token) == 42

    def test_token_signed_with_other_secret_rejected(self):
        other = TokenService(secret_key="someone-else", expire_minutes=5)
        token = other.create_access_token(1, "a@example.com")
        with pytest.raises(AuthenticationError):
            self.tokens.decode(token)

    def test_expired_token_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "1", "type": "access", "iat": past, "exp": past + timedelta(minutes=1)},
            "unit-test-secret",
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            self.tokens.decode(token)

    def test_token_without_access_type_rejected(self):
        token = jwt.encode({"sub": "1"}, "unit-test-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            self.tokens.decode(token)

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationError):
            self.tokens.account_id_from("not.a.jwt")


class TestParseBasicCredentials:

    def test_valid_header(self):
        email, password = parse_basic_credentials(_basic("John@Example.com:pw:123"))
        assert email == "john@example.com"
        # Only the first colon separates
        assert password == "pw:123"

    @pytest.mark.parametrize("encoded", [
        "%%%not-base64%%%",
        _basic("no-separator"),
        _basic(":password-only"),
    ])
    def test_malformed(self, encoded):
        with pytest.raises(AuthenticationError, match="Malformed Basic credentials"):
            parse_basic_credentials(encoded)

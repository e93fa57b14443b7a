"""
Unit tests for security utilities.
"""
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from tablebook.core.security import (
    blacklist_token,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    is_token_blacklisted,
    verify_password,
)


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password(self):
        hashed = hash_password("mysecretpassword")

        assert hashed != "mysecretpassword"
        assert len(hashed) > 20

    def test_hash_password_different_each_time(self):
        assert hash_password("mysecretpassword") != hash_password("mysecretpassword")

    def test_verify_password(self):
        hashed = hash_password("mysecretpassword")

        assert verify_password("mysecretpassword", hashed) is True
        assert verify_password("wrongpassword", hashed) is False


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_access_token_round_trip(self):
        payload = decode_token(create_access_token(subject="user-123"))

        assert payload["sub"] == "user-123"
        assert payload["type"] == "access"

    def test_refresh_token_type(self):
        assert decode_token(create_refresh_token(subject="user-123"))["type"] == "refresh"

    def test_tokens_issued_together_differ(self):
        assert create_refresh_token(subject="user-123") != create_refresh_token(subject="user-123")

    def test_expired_token(self):
        token = create_access_token(subject="user-123", expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_garbage_token(self):
        assert decode_token("not.a.token") is None


class TestBlacklist:

    def test_blacklist_token(self, db: Session):
        token = create_refresh_token(subject="user-123")
        assert is_token_blacklisted(token, db) is False

        blacklist_token(token, datetime.now(timezone.utc) + timedelta(days=1), db)
        assert is_token_blacklisted(token, db) is True

        # idempotent
        blacklist_token(token, datetime.now(timezone.utc) + timedelta(days=1), db)
        assert is_token_blacklisted(token, db) is True

"""
Security utilities for staff password hashing and JWT token handling.
"""
from datetime import datetime, timedelta, timezone
from typing import Any
import hashlib
import uuid

import bcrypt
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from tablebook.core.config import get_settings

settings = get_settings()


def hash_token(token: str) -> str:
    """Hash a JWT token for storage in the blacklist."""
    return hashlib.sha256(token.encode()).hexdigest()


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def _create_token(subject: str | Any, token_type: str, expires_delta: timedelta) -> str:
    to_encode = {
        "sub": str(subject),
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": token_type,
        "jti": uuid.uuid4().hex,  # tokens issued in the same second must differ
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    """Create a short-lived JWT access token for a staff user."""
    return _create_token(
        subject,
        "access",
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    """Create a JWT refresh token."""
    return _create_token(
        subject,
        "refresh",
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(token: str) -> dict | None:
    """Decode and validate a JWT token. Returns payload or None if invalid."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def is_token_blacklisted(token: str, db: Session) -> bool:
    """Check whether a refresh token has already been used."""
    from tablebook.models.token_blacklist import TokenBlacklist

    return db.query(TokenBlacklist).filter(
        TokenBlacklist.token_hash == hash_token(token)
    ).first() is not None


def blacklist_token(token: str, expires_at: datetime, db: Session) -> None:
    """
    Revoke a token.

    Args:
        token: The JWT token string to blacklist
        expires_at: When the token expires (for cleanup)
        db: Database session
    """
    from tablebook.models.token_blacklist import TokenBlacklist

    if is_token_blacklisted(token, db):
        return

    db.add(TokenBlacklist(token_hash=hash_token(token), expires_at=expires_at))
    db.commit()

"""
Revoked staff refresh tokens.
"""
from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func

from tablebook.db.base import Base


class TokenBlacklist(Base):
    """
    A refresh token that has already been exchanged.

    Only the SHA-256 of the token is kept. Rows past ``expires_at`` can be
    purged, the token would be rejected on expiry anyway.
    """
    __tablename__ = "token_blacklist"

    token_hash = Column(String(64), primary_key=True)
    blacklisted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('idx_token_blacklist_expires', 'expires_at'),
    )

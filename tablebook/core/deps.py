"""
FastAPI dependencies shared by the staff routers.
"""
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tablebook.core.security import decode_token
from tablebook.db.session import get_db
from tablebook.models.user import User
from tablebook.services.booking_settings import BookingSettings, load_booking_settings

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the staff user from a bearer access token, 401 otherwise."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        raise unauthorized

    user_id = payload.get("sub")
    if not user_id:
        raise unauthorized

    user = db.get(User, _parse_uuid(user_id, unauthorized))
    if user is None or not user.is_active:
        raise unauthorized
    return user


def _parse_uuid(value: str, error: HTTPException) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise error


def get_booking_settings(db: Session = Depends(get_db)) -> BookingSettings:
    """Typed restaurant settings, parsed once per request."""
    return load_booking_settings(db)

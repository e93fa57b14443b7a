"""
Staff accounts allowed to use the owner dashboard endpoints.
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Uuid, func

from tablebook.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())

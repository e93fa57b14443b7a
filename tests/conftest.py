"""
Test configuration and fixtures.

Runs against an in-memory SQLite database by default. Point
``TEST_DATABASE_URL`` at a PostgreSQL database to run the suite (including
the concurrency tests) against the production engine.
"""
import os
from decimal import Decimal
import pytest
from typing import Generator
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

# Set test environment before importing app
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite://")
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-jwt"
for _name in ("REDIS_URL", "TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER", "SMTP_HOST"):
    os.environ.pop(_name, None)

from tablebook.main import app
from tablebook.db.base import Base
from tablebook.db.session import engine, get_db
import tablebook.models  # noqa: F401
from tablebook.models.user import User
from tablebook.models.table import DiningTable
from tablebook.models.menu import MenuItem
from tablebook.core.security import hash_password
from tablebook.routers.reservations import get_notifier


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotifier:
    """Stands in for the SMS/email notifier and records what would be sent."""

    def __init__(self):
        self.sms = []
        self.emails = []

    def send_sms(self, phone_number, message):
        self.sms.append((phone_number, message))

    def send_email(self, address, subject, body):
        self.emails.append((address, subject, body))


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(db: Session, notifier: RecordingNotifier) -> Generator[TestClient, None, None]:
    """Create test client with database session and notifier overrides."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db: Session) -> User:
    user = User(
        email="staff@example.com",
        hashed_password=hash_password("testpassword123"),
        full_name="Test Staff",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def auth_headers(client: TestClient, test_user: User) -> dict:
    """Get auth headers for the staff user."""
    response = client.post(
        "/api/auth/login",
        json={"email": "staff@example.com", "password": "testpassword123"}
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def tables(db: Session) -> dict:
    """A small floor: two 2-tops, a 4-top and a 6-top, keyed by name."""
    rows = [
        DiningTable(name="T1", seats=2, position_x=100, position_y=100),
        DiningTable(name="T2", seats=4, position_x=200, position_y=100),
        DiningTable(name="T3", seats=2, position_x=300, position_y=100),
        DiningTable(name="T4", seats=6, position_x=100, position_y=200),
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return {row.name: row for row in rows}


@pytest.fixture
def menu_items(db: Session) -> dict:
    rows = [
        MenuItem(name="Hummus met Pita", price=Decimal("8.50"), category="Voorgerechten", prep_time_minutes=10,
                 is_vegetarian=True, allergens=["gluten", "sesam"]),
        MenuItem(name="Lams Kebab", price=Decimal("18.50"), category="Hoofdgerechten", prep_time_minutes=25),
        MenuItem(name="Chef Special", price=Decimal("22.50"), category="Specials", prep_time_minutes=35,
                 is_available=False),
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return {row.name: row for row in rows}

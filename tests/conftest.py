"""Shared fixtures: in-memory database, fast hasher, recording notifier."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wattboard.api.dependencies import get_notification_sender, get_password_hasher
from wattboard.core.database import Base, get_db
from wattboard.core.security import PasswordHasher, TokenService
from wattboard.main import app
from wattboard.models.user import User
from wattboard.services.auth import AuthService
from wattboard.services.credentials import CredentialStore


class RecordingNotifier:
    """Notification sender that keeps messages instead of mailing them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, body: str) -> None:
        self.sent.append((to, subject, body))


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def hasher():
    """Cheapest bcrypt cost so tests stay fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(secret_key="test-secret")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store(test_db, hasher):
    return CredentialStore(test_db, hasher)


@pytest.fixture
def auth_service(store, hasher, tokens, notifier):
    return AuthService(store, hasher, tokens, notifier)


@pytest.fixture
def client(test_db, hasher, notifier):
    """Create a test client with database, hasher and notifier overrides."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_notification_sender] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(test_db, hasher):
    """Create a test user in the database."""
    user = User(
        username="testuser",
        email="test@example.com",
        hashed_password=hasher.hash("testpassword123"),
    )
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user


@pytest.fixture
def register_user(client):
    """Register through the API and return the session header for the new user."""

    def _register(username: str, email: str, password: str = "password123") -> dict[str, str]:
        response = client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201
        return {"x-auth-token": response.json()["token"]}

    return _register

"""Pytest fixtures for the transcription workflow.

Provides reusable test fixtures for:
- In-memory SQLite database session, tables created and dropped per test
- Users per role (two regular transcribers, one admin)
- Repositories and the workflow service bound to the test session
- Test clients authenticated through real login sessions

Usage:
    def test_claim(regular_client, pending_file):
        response = regular_client.post(f"/api/v1/files/{pending_file.id}/claim")
        assert response.status_code == 200
"""

import os

# Set environment variables BEFORE any application imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("PASSWORD_PEPPER", "test-pepper-secret-key-32-chars-long")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("LOG_JSON", "false")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from transcribeflow.config import get_settings

get_settings.cache_clear()

from transcribeflow.auth.password import hash_password
from transcribeflow.auth.session import IdentityProvider
from transcribeflow.database import get_db
from transcribeflow.domain.workflow import engine as workflow_engine
from transcribeflow.domain.workflow.actor import Actor
from transcribeflow.files.service import FileWorkflowService
from transcribeflow.infrastructure.repositories import (
    FileRepository,
    LoginSessionRepository,
    UserRepository,
)
from transcribeflow.infrastructure.repositories.user_repository import to_record
from transcribeflow.models import Base, User


REGULAR_PASSWORD = "Transcribe#2024"
OTHER_PASSWORD = "Bruno#2024"
ADMIN_PASSWORD = "Review#2024"

# One shared connection so every session sees the same in-memory database
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


def _make_user(db_session: Session, name: str, email: str, password: str, role: str, **kwargs) -> User:
    user = User(
        name=name,
        phone="11987654321",
        email=email,
        role=role,
        password_hash=hash_password(password),
        must_change_password=kwargs.get("must_change_password", False),
        active=kwargs.get("active", True),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def regular_user(db_session: Session) -> User:
    """Create a regular transcriber."""
    return _make_user(db_session, "Ana Souza", "ana@acme.com", REGULAR_PASSWORD, "regular")


@pytest.fixture(scope="function")
def other_user(db_session: Session) -> User:
    """Create a second regular transcriber."""
    return _make_user(db_session, "Bruno Lima", "bruno@acme.com", OTHER_PASSWORD, "regular")


@pytest.fixture(scope="function")
def admin_user(db_session: Session) -> User:
    """Create an admin reviewer."""
    return _make_user(db_session, "Carla Reis", "carla@acme.com", ADMIN_PASSWORD, "admin")


@pytest.fixture
def regular_actor(regular_user: User) -> Actor:
    return Actor.from_user(to_record(regular_user))


@pytest.fixture
def other_actor(other_user: User) -> Actor:
    return Actor.from_user(to_record(other_user))


@pytest.fixture
def admin_actor(admin_user: User) -> Actor:
    return Actor.from_user(to_record(admin_user))


@pytest.fixture
def file_store(db_session: Session) -> FileRepository:
    return FileRepository(db_session)


@pytest.fixture
def user_directory(db_session: Session) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def file_service(file_store: FileRepository, user_directory: UserRepository) -> FileWorkflowService:
    return FileWorkflowService(store=file_store, users=user_directory)


@pytest.fixture
def pending_file(file_store: FileRepository, regular_actor: Actor):
    """A pending file uploaded by the regular user."""
    file_id = file_store.insert(workflow_engine.create(regular_actor, "Parish register 1887", "uploads/register-1887.jpg"))
    return file_store.find_by_id(file_id)


# =============================================================================
# HTTP CLIENTS
# =============================================================================

@pytest.fixture(scope="function")
def app(db_session: Session):
    """FastAPI app with get_db bound to the test session."""
    from transcribeflow.main import app as fastapi_app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


def login_token(db_session: Session, email: str, password: str) -> str:
    """Log in through the identity provider and return the bearer token."""
    identity = IdentityProvider(
        users=UserRepository(db_session),
        sessions=LoginSessionRepository(db_session),
    )
    identity.login(email, password)
    return identity.token


def _client(app, token: str) -> TestClient:
    return TestClient(app, headers={"Authorization": f"Bearer {token}"})


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    """Unauthenticated test client."""
    return TestClient(app)


@pytest.fixture(scope="function")
def regular_client(app, db_session: Session, regular_user: User) -> TestClient:
    return _client(app, login_token(db_session, regular_user.email, REGULAR_PASSWORD))


@pytest.fixture(scope="function")
def other_client(app, db_session: Session, other_user: User) -> TestClient:
    return _client(app, login_token(db_session, other_user.email, OTHER_PASSWORD))


@pytest.fixture(scope="function")
def admin_client(app, db_session: Session, admin_user: User) -> TestClient:
    return _client(app, login_token(db_session, admin_user.email, ADMIN_PASSWORD))


@pytest.fixture
def passwords() -> dict:
    """Plain-text passwords of the user fixtures, keyed by fixture name."""
    return {
        "regular_user": REGULAR_PASSWORD,
        "other_user": OTHER_PASSWORD,
        "admin_user": ADMIN_PASSWORD,
    }


@pytest.fixture
def login(db_session: Session):
    """Return a function that logs a user in and yields a bearer token."""
    def _login(email: str, password: str) -> str:
        return login_token(db_session, email, password)
    return _login

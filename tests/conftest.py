"""
Pytest fixtures for the community reports API.

Every test gets a fresh in-memory SQLite database; the FastAPI app is pointed
at it through a `get_db` dependency override.
"""

import itertools
import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.security import make_tokens  # noqa: E402
from app.db.session import get_db, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402
from app.schemas.issue import ReportDraft  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(session_factory):
    """Create a committed user and return it detached with its attributes loaded."""
    counter = itertools.count(1)

    def _make(name=None, role=UserRole.citizen, xp_points=0):
        n = next(counter)
        session = session_factory()
        try:
            user = User(
                name=name or f"User {n}",
                email=f"user{n}@example.com",
                hashed_password="not-a-real-hash",
                role=role,
                xp_points=xp_points,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
        finally:
            session.close()

    return _make


@pytest.fixture
def draft():
    def _draft(**overrides):
        fields = {
            "title": "Broken streetlight",
            "description": "The streetlight on 5th Avenue has been out for a week.",
            "severity": "medium",
            "location": "12.9716, 77.5946",
            "verified": True,
        }
        fields.update(overrides)
        return ReportDraft(**fields)

    return _draft


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = make_tokens(user.email, user.role.value)["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _headers

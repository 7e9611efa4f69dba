"""Shared pytest fixtures for the MockMatch API tests"""

import os
from datetime import datetime, timedelta

# Configure the app for tests before anything imports mockmatch.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["REGISTER_RATE_LIMIT"] = "100"
os.environ["REDIS_URL"] = ""
os.environ["REDIS_HOST"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from mockmatch import rate_limiter  # noqa: E402
from mockmatch.database import Base, SessionLocal, engine  # noqa: E402
from mockmatch.main import app  # noqa: E402
from mockmatch.shared.time_utils import utcnow  # noqa: E402


@pytest.fixture(autouse=True)
def db_tables():
    """Fresh schema on the shared in-memory database for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def anon_client():
    client = TestClient(app)
    yield client
    client.close()


@pytest.fixture
def make_client():
    """Factory: register a user and return a TestClient logged in as them.

    The registered user's JSON is available as `client.user`.
    """
    clients = []

    def _make(username, experience_level="intermediate", skills=None, **extra):
        client = TestClient(app)
        payload = {
            "username": username,
            "password": "secret123",
            "fullName": username.title(),
            "email": f"{username}@example.com",
            "experienceLevel": experience_level,
            "skills": skills or [],
        }
        payload.update(extra)
        response = client.post("/api/register", json=payload)
        assert response.status_code == 201, response.text
        client.user = response.json()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


def iso(value: datetime) -> str:
    return value.replace(microsecond=0).isoformat()


def hours_from_now(hours: float) -> datetime:
    return utcnow().replace(microsecond=0) + timedelta(hours=hours)

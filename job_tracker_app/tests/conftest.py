"""
Pytest configuration and shared fixtures for the Job Application Tracker tests.
"""
import os

# Settings are read once at import time, so the test environment must be in
# place before anything from the backend is imported.
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-tokens-12345678901234567890")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from job_tracker_app.backend import schemas
from job_tracker_app.backend.main import app
from job_tracker_app.backend.models.db.database import get_db, Base
from job_tracker_app.backend.models.db.crud import create_user
from job_tracker_app.backend.security import get_password_hash
from job_tracker_app.backend.services.company_service import CompanyDataService
from job_tracker_app.backend.services.company_store import CompanyStore
from job_tracker_app.backend.services.notifications import Notifier
from job_tracker_app.backend.services.rate_limiter import api_rate_limiter


# Test Database Setup
@pytest.fixture(scope="function")
def test_db_engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session):
    """Create a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """The shared limiter would otherwise carry state between tests."""
    api_rate_limiter.reset()
    yield
    api_rate_limiter.reset()


# User Fixtures
@pytest.fixture
def test_user_data():
    """Sample user data for testing."""
    return {
        "email": "test@example.com",
        "password": "testpassword123",
    }


@pytest.fixture
def test_user(test_db_session, test_user_data):
    """Create a test user directly in the database."""
    hashed_password = get_password_hash(test_user_data["password"])
    user_schema = schemas.UserCreate(**test_user_data)
    return create_user(test_db_session, user_schema, hashed_password)


@pytest.fixture
def other_user(test_db_session):
    user_schema = schemas.UserCreate(email="other@example.com", password="otherpassword123")
    return create_user(test_db_session, user_schema, get_password_hash(user_schema.password))


def register_and_login(client, user_data):
    """Register ``user_data`` and return bearer headers for it."""
    response = client.post("/api/auth/register", json=user_data)
    assert response.status_code == 200

    login_data = {
        "username": user_data["email"],
        "password": user_data["password"]
    }
    response = client.post("/api/auth/login", data=login_data)
    assert response.status_code == 200

    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_client, test_user_data):
    """Get authentication headers for API requests."""
    return register_and_login(test_client, test_user_data)


@pytest.fixture
def other_auth_headers(test_client):
    return register_and_login(test_client, {"email": "user2@example.com", "password": "password123"})


# Service Fixtures
@pytest.fixture
def company_store(test_db_session):
    return CompanyStore(test_db_session)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def company_service(company_store, test_user, notifier):
    return CompanyDataService(store=company_store, user_id=test_user.id, notifier=notifier)


# Company Test Data
@pytest.fixture
def sample_company_data():
    return {
        "name": "Acme Corp",
        "position": "Engineer",
        "positionType": "new-grad",
        "status": "pending",
        "deadline": "2025-01-30T23:59",
        "description": "Backend platform team",
        "applicationLink": "https://acme.example.com/jobs/42",
    }


@pytest.fixture
def make_company():
    """Factory for in-memory companies, used by the pure view/stat tests."""
    counter = {"n": 0}
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _make(status="pending", **overrides):
        counter["n"] += 1
        data = {
            "id": f"company-{counter['n']}",
            "name": f"Company {counter['n']}",
            "position": "Engineer",
            "status": status,
            "created_at": base + timedelta(days=counter["n"]),
        }
        data.update(overrides)
        return schemas.Company.model_validate(data)

    return _make

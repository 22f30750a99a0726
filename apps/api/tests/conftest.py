"""
Shared fixtures: an in-memory SQLite database behind the FastAPI app.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fieldops.core.database import Base, get_db
from fieldops.core.rate_limit import InMemoryRateLimiter
from fieldops.main import app


@pytest.fixture
def db_session():
    """Fresh schema per test; StaticPool keeps the one in-memory connection alive."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """TestClient with get_db pointed at the test session."""
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.state.check_in_limiter = InMemoryRateLimiter(max_requests=3, window_seconds=60)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def company(client):
    resp = client.post("/companies", json={"name": "Acme Electrical", "timezone": "Australia/Sydney"})
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def worker(client, company):
    resp = client.post(
        f"/companies/{company['company_id']}/workers",
        json={
            "name": "Sam Carter",
            "email": "sam@example.com",
            "employment_type": "full_time",
            "hourly_rate": "50.00",
        },
    )
    assert resp.status_code == 201
    return resp.json()

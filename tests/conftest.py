"""Shared fixtures for the intake API tests.

Each test gets its own in-memory SQLite database; ``get_db`` is overridden
so the app never touches the configured ``DATABASE_URL``.
"""

from __future__ import annotations

import os
from typing import Callable, Dict

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RI_API_KEY", "test-api-key")

import pytest  # type: ignore
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth import create_access_token
from database import get_db, init_db
from intake_service import app


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def client(session_factory) -> TestClient:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_headers() -> Callable[..., Dict[str, str]]:
    """Build an Authorization header for a given role and company."""

    def _make(role: str = "recruiter", company_id: str = "acme", user_id: str = "user-1") -> Dict[str, str]:
        token = create_access_token(user_id, company_id, role)
        return {"Authorization": f"Bearer {token}"}

    return _make

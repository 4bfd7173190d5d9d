"""Shared pytest fixtures for backend tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SKIP_SCHEMA_INIT", "1")
os.environ.setdefault("JWT_SECRET_KEY", "backend-tests-secret-key-with-32-plus-chars")


@pytest.fixture
def db_engine():
    from core.inventory_schema import ensure_inventory_tables

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    ensure_inventory_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(db_engine) -> TestClient:
    """TestClient wired to an in-memory database, without credentials."""
    from backend.dependencies.services import get_db_engine
    from backend.main import app

    app.dependency_overrides[get_db_engine] = lambda: db_engine
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user_id: int = 1, username: str = "test-user") -> str:
    from backend.dependencies.security import create_access_token

    return create_access_token({"sub": str(user_id), "username": username})


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def api_client(client, auth_headers) -> TestClient:
    client.headers.update(auth_headers)
    return client

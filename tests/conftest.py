"""
Shared pytest fixtures.

Every database-backed test gets its own in-memory SQLite engine.
Rate limiting is switched off before the application is imported.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.infrastructure.library.database import create_schema  # noqa: E402
from app.interfaces.library.dependencies import get_engine  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture
def engine():
    """In-memory SQLite engine with the library schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(engine):
    """TestClient bound to the per-test engine."""
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

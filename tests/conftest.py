"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from agora.config import AgoraConfig
from agora.database.models import Base
from agora.services.forum_service import ForumService


class FakeClock:
    """Manually advanced UTC clock.  Call it like ``utcnow``."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now += timedelta(**delta)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def forum(clock: FakeClock) -> ForumService:
    """A fresh forum on the default taxonomy, driven by the fake clock."""
    return ForumService(AgoraConfig(), clock=clock)


@pytest.fixture
def alice(forum: ForumService):
    return forum.register_user("alice")


@pytest.fixture
def bob(forum: ForumService):
    return forum.register_user("bob")


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all Agora tables.

    Uses StaticPool so every thread (``asyncio.to_thread`` included) shares
    the same in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def client(forum: ForumService):
    """FastAPI TestClient wired to the ``forum`` fixture.

    Not used as a context manager, so the snapshot lifespan never runs.
    """
    from fastapi.testclient import TestClient

    from agora.api.deps import get_forum
    from agora.api.main import app

    app.dependency_overrides[get_forum] = lambda: forum
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()

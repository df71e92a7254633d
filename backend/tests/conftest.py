from __future__ import annotations
from datetime import datetime, timezone
import pytest
from dailydraw.auth_deps import get_announcer, get_clock, get_store
from dailydraw.config import settings
from dailydraw.main import app
from dailydraw.security import make_access_token
from dailydraw.services.announcer import RecordingAnnouncer
from dailydraw.services.days import Clock
from dailydraw.store import MemoryStore

DAY = "2025-01-10"
NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)
PNG = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"
MODERATOR = "mod_alice"


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return Clock(fixed=NOW)


@pytest.fixture
def announcer():
    return RecordingAnnouncer()


@pytest.fixture
def wired(store, clock, announcer, monkeypatch):
    """App with in-memory collaborators and one configured moderator."""
    monkeypatch.setattr(settings, "moderators", [MODERATOR])
    monkeypatch.setattr(settings, "scheduler_token", "")
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_announcer] = lambda: announcer
    yield app
    app.dependency_overrides.clear()


def auth(username: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_access_token(username)}"}

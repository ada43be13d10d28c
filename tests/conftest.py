from datetime import datetime, timedelta, timezone

import pytest

from lexigraph import fsrs


@pytest.fixture
def t0():
    return datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def one_day():
    return timedelta(days=1)


@pytest.fixture
def new_state():
    return fsrs.new_memory_state()


@pytest.fixture
def reviewed_state(t0):
    """Stability 4 after a first GOOD at t0."""
    return fsrs.MemoryState(stability=4.0, difficulty=5.0, last_review_timestamp=t0, review_count=1)


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Points DATABASE_URL at a fresh SQLite file and creates the schema."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'lexigraph.db'}")
    monkeypatch.setenv("TEST_MODE", "false")
    monkeypatch.setenv("DEFAULT_USER_ID", "tester")
    fsrs.init_db()
    return tmp_path

import pytest

from roster.store import RosterStore


@pytest.fixture
def db_path(tmp_path):
    """Fresh local storage file per test."""
    return str(tmp_path / "roster.db")


@pytest.fixture
def store(db_path):
    """Loaded store that starts with no players."""
    s = RosterStore.create(db_path, bootstrap="empty")
    yield s
    s.teardown()

"""
conftest.py
-----------
Shared pytest fixtures for Kokizami tests.

Provides fixtures for:
- Database setup and teardown
- Manager and in-memory repository pairs (run against the same contract)
- A fixed, steerable clock
- Kokizami facades on SQLite and on MemoryStorage
"""
import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from tempfile import TemporaryDirectory


class FixedClock:
    """Clock returning a fixed instant until advanced."""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_db_path(tmp_dir):
    """Create temporary test database path."""
    return tmp_dir / "test.db"


# ----- Test Database Fixtures -----

@pytest.fixture
def test_db(test_db_path):
    """
    Create test database instance with schema.

    Returns a KokizamiDB on a fresh file. Connections are released after
    the test.
    """
    from kokizami.database.manager import KokizamiDB

    db = KokizamiDB(db_path=test_db_path)
    yield db
    db.close()


@pytest.fixture
def db_session(test_db):
    """Session inside an open session_scope of the test database."""
    with test_db.session_scope() as session:
        yield session


@pytest.fixture
def kizami_manager(db_session):
    """Create KizamiManager instance for testing."""
    from kokizami.database.managers import KizamiManager
    return KizamiManager(db_session)


@pytest.fixture
def tag_manager(db_session):
    """Create TagManager instance for testing."""
    from kokizami.database.managers import TagManager
    return TagManager(db_session)


@pytest.fixture(params=["sql", "memory"])
def storage(request, tmp_dir):
    """Each storage backend: KokizamiDB on SQLite and MemoryStorage."""
    if request.param == "sql":
        from kokizami.database.manager import KokizamiDB

        db = KokizamiDB(db_path=tmp_dir / "kokizami.db")
        yield db
        db.close()
    else:
        from kokizami.database.memory import MemoryStorage

        yield MemoryStorage()


@pytest.fixture
def repositories(storage):
    """(kizamis, tags) repositories inside an open scope of each backend."""
    with storage.session_scope():
        yield storage.kizamis, storage.tags


# ----- Clock Fixtures -----

@pytest.fixture
def start_time():
    """Fixed instant the clock starts at: 2024-05-10 09:00:00 UTC."""
    return datetime(2024, 5, 10, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(start_time):
    """Steerable clock starting at start_time."""
    return FixedClock(start_time)


# ----- Facade Fixtures -----

@pytest.fixture
def kkzm(storage, clock):
    """Kokizami facade on each backend, reading edit times as UTC."""
    from kokizami import Kokizami
    return Kokizami(storage, clock=clock, tz=timezone.utc)

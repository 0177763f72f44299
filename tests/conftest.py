"""
Pytest configuration and shared fixtures for PyPlaylist tests.
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from PySide6.QtCore import QCoreApplication

from core.backend import LibraryBackend
from core.config import AppConfig
from core.state import AppState
from db.database import initialize_database

from fakes import DeferredDispatcher, FakeBackend, FakeMediaElement, SyncDispatcher, make_track


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """Signals and QObjects need an application instance."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after each test."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_dir):
    return AppConfig(app_data_dir=str(temp_dir / "data"))


@pytest.fixture
def db(config):
    """A migrated database in a temporary data directory."""
    conn = initialize_database(config.app_data_dir)
    yield conn
    conn.close()


@pytest.fixture
def library_backend(db, config):
    """The real backend pointing at the temporary database."""
    return LibraryBackend(config.db_path)


@pytest.fixture
def tracks():
    """25 tracks: three pages at the default page size."""
    return [make_track(i) for i in range(1, 26)]


@pytest.fixture
def backend(tracks):
    return FakeBackend(tracks)


@pytest.fixture
def sync_dispatcher():
    return SyncDispatcher()


@pytest.fixture
def deferred_dispatcher():
    return DeferredDispatcher()


@pytest.fixture
def element():
    return FakeMediaElement()


@pytest.fixture
def app_state(config):
    return AppState(config)

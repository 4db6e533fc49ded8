"""
Global test configuration for pytest.

This file is automatically loaded by pytest and contains global fixtures
and configuration settings that apply to all tests.
"""
import os
import sys
import tempfile

import pytest_asyncio

# Add the backend directory to the Python path so that 'process_cache' can be imported
backend_dir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

# Keep test logs out of the working directory; must run before settings are loaded
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="process-cache-logs-"))

from process_cache.db.session import Database  # noqa: E402
from process_cache.db.sync import DatabaseSyncOption, sync_database  # noqa: E402

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest_asyncio.fixture
async def database():
    """A freshly provisioned database."""
    db = Database(TEST_DATABASE_URL, echo=False)
    await sync_database(db, DatabaseSyncOption.NEW)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    """A session on the test database."""
    async with database.session() as session:
        yield session

"""
Database connection management.

A Database owns one async engine and the session factory bound to it.
Callers open sessions from it and hand them to the services.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from process_cache.config.settings import get_settings
from process_cache.core.logger import LoggerManager

logger_manager = LoggerManager.get_instance()


def _engine_options(database_uri: str, echo: bool) -> dict:
    url = make_url(database_uri)
    options = {"echo": echo}
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        # A memory database only lives as long as its single connection
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    elif url.get_backend_name() == "postgresql":
        options["pool_pre_ping"] = True
    return options


class Database:
    """Async engine plus session factory for one database URI."""

    def __init__(self, database_uri: Optional[str] = None, echo: Optional[bool] = None):
        """
        Create the engine. No connection is opened until first use.

        Args:
            database_uri: SQLAlchemy async URI; defaults to DATABASE_URI from settings
            echo: Echo SQL statements; defaults to DB_ECHO from settings
        """
        settings = get_settings()
        self.database_uri = database_uri or settings.DATABASE_URI
        echo = settings.DB_ECHO if echo is None else echo

        self.engine: AsyncEngine = create_async_engine(
            self.database_uri, **_engine_options(self.database_uri, echo)
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger_manager.database.debug(f"Created engine for {self.engine.url.render_as_string(hide_password=True)}")

    def session(self) -> AsyncSession:
        """Open a new session; use it as an async context manager."""
        return self.session_factory()

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger_manager.database.debug("Engine disposed")


def create_connection(database_uri: Optional[str] = None, echo: Optional[bool] = None) -> Database:
    """Create a Database for ``database_uri`` (settings when omitted)."""
    return Database(database_uri, echo)

"""
Schema provisioning for the process cache tables.

NEW drops and recreates the four tables (all data is lost). ALTER creates
whatever tables are missing and leaves existing ones and their rows alone.
Column-level changes on existing tables go through the alembic migrations.
"""
from enum import Enum

from sqlalchemy import inspect

from process_cache.core.logger import LoggerManager
from process_cache.db.base import Base
from process_cache.db.session import Database
import process_cache.models  # noqa: F401  registers the tables on Base.metadata

logger = LoggerManager.get_instance().database

TABLE_NAMES = ("processes", "process_jobs", "process_job_logs", "process_cache")


class DatabaseSyncOption(str, Enum):
    NEW = "new"
    ALTER = "alter"


async def sync_database(database: Database, option: DatabaseSyncOption = DatabaseSyncOption.ALTER) -> None:
    """
    Provision the process cache tables.

    Args:
        database: The database to provision
        option: NEW to drop and recreate, ALTER to create missing tables only
    """
    option = DatabaseSyncOption(option)
    async with database.engine.begin() as conn:
        if option == DatabaseSyncOption.NEW:
            logger.warning("Dropping process cache tables")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Process cache tables synced ({option.value})")


def find_missing_tables(sync_conn) -> list:
    """Return the process cache tables not present on a sync connection."""
    existing = set(inspect(sync_conn).get_table_names())
    return [name for name in TABLE_NAMES if name not in existing]


async def missing_tables(database: Database) -> list:
    """Return the process cache tables not present in the database."""
    async with database.engine.connect() as conn:
        return await conn.run_sync(find_missing_tables)

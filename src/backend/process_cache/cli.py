"""
Command line entry point.

    process-cache sync --mode alter
    process-cache sync --mode new --database-uri sqlite+aiosqlite:///./jobs.db
    process-cache check
"""
import argparse
import asyncio
import sys
from typing import List, Optional

from process_cache.core.logger import LoggerManager
from process_cache.db.session import Database
from process_cache.db.sync import DatabaseSyncOption, missing_tables, sync_database

logger = LoggerManager.get_instance().system


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI options."""
    parser = argparse.ArgumentParser(prog="process-cache", description="Process cache database tools")
    parser.add_argument(
        "--database-uri",
        help="Async SQLAlchemy URI (defaults to DATABASE_URI from the environment)",
    )
    parser.add_argument(
        "--echo",
        action="store_true",
        help="Echo SQL statements",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Create the process cache tables")
    sync_parser.add_argument(
        "--mode",
        choices=[option.value for option in DatabaseSyncOption],
        default=DatabaseSyncOption.ALTER.value,
        help="'new' drops and recreates the tables, 'alter' only creates missing ones",
    )

    subparsers.add_parser("check", help="Report missing process cache tables")
    return parser


async def run(args: argparse.Namespace) -> int:
    database = Database(args.database_uri, echo=args.echo or None)
    try:
        if args.command == "sync":
            await sync_database(database, DatabaseSyncOption(args.mode))
            return 0

        missing = await missing_tables(database)
        if missing:
            logger.error(f"Missing tables: {', '.join(missing)}")
            return 1
        logger.info("All process cache tables present")
        return 0
    finally:
        await database.dispose()


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())

"""
Key-value persistence for recurring jobs.

Processes own jobs; jobs store append-only logs and cache entries per
machine in a relational database.
"""
from process_cache.core.exceptions import JobNotLoadedError, NotLoadedError
from process_cache.db.session import Database, create_connection
from process_cache.db.sync import DatabaseSyncOption, sync_database
from process_cache.models.enums import ProcessLogType
from process_cache.schemas.process_job_log import JobLogFilters
from process_cache.services.job_service import CacheHooks, JobService
from process_cache.services.machine_service import MachineService
from process_cache.services.process_manager import ProcessManager
from process_cache.utils.name_normalizer import normalize_name

__version__ = "0.1.0"

__all__ = [
    "CacheHooks",
    "Database",
    "DatabaseSyncOption",
    "JobLogFilters",
    "JobNotLoadedError",
    "JobService",
    "MachineService",
    "NotLoadedError",
    "ProcessLogType",
    "ProcessManager",
    "create_connection",
    "normalize_name",
    "sync_database",
]

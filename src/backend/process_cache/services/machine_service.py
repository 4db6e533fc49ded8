"""
Machine-scoped access to process logs and cache entries.

Every row written or read here is tagged with the machine name the service
was created for. Returned rows are detached from the session so they stay
readable after a later rollback.
"""
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from process_cache.core.exceptions import NotLoadedError
from process_cache.core.logger import LoggerManager
from process_cache.models.enums import ProcessLogType
from process_cache.models.process import Process
from process_cache.models.process_cache import ProcessCache
from process_cache.models.process_job import ProcessJob
from process_cache.models.process_job_log import ProcessJobLog
from process_cache.repositories.process_cache_repository import ProcessCacheRepository
from process_cache.repositories.process_job_log_repository import ProcessJobLogRepository
from process_cache.schemas.process_job_log import DEFAULT_JOB_LOG_FILTERS, JobLogFilters
from process_cache.services.process_manager import ProcessManager
from process_cache.utils.timestamps import utc_now

logger = LoggerManager.get_instance().cache


class MachineService:
    """Logs and cache entries of one machine. Call ``load()`` before anything else."""

    def __init__(self, session: AsyncSession, machine_name: str, process_manager: Optional[ProcessManager] = None):
        """
        Initialize the service.

        Args:
            session: Database session
            machine_name: Identifier of the executing host or instance
            process_manager: Manager to share; a new one on the same session when omitted
        """
        self.machine = machine_name
        self.session = session
        self.process_manager = process_manager or ProcessManager(session)
        self.log_repository = ProcessJobLogRepository(session)
        self.cache_repository = ProcessCacheRepository(session)
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """
        Check the schema through the process manager.

        Raises:
            RuntimeError: If any process cache table is missing
        """
        await self.process_manager.load()
        self._loaded = True

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise NotLoadedError(f"Machine '{self.machine}' used before load()")

    async def get_process_logs(
        self, process: Process, filters: JobLogFilters = DEFAULT_JOB_LOG_FILTERS
    ) -> List[ProcessJobLog]:
        """
        Get the logs of a process written by this machine.

        Args:
            process: Process to list logs for
            filters: Optional offset, limit and type filter

        Returns:
            Log entries ordered by creation time ascending
        """
        self._require_loaded()
        logs = await self.log_repository.find_logs(
            process_id=process.id,
            machine=self.machine,
            log_type=filters.type.value if filters.type else None,
            offset=filters.offset,
            limit=filters.limit,
        )
        return [self.log_repository.detach(log) for log in logs]

    async def get_job_logs(
        self, job: ProcessJob, filters: JobLogFilters = DEFAULT_JOB_LOG_FILTERS
    ) -> List[ProcessJobLog]:
        """
        Get the logs of a job written by this machine.

        Args:
            job: Job to list logs for
            filters: Optional offset, limit and type filter

        Returns:
            Log entries ordered by creation time ascending
        """
        self._require_loaded()
        logs = await self.log_repository.find_logs(
            process_id=job.process_id,
            machine=self.machine,
            job_id=job.id,
            log_type=filters.type.value if filters.type else None,
            offset=filters.offset,
            limit=filters.limit,
        )
        return [self.log_repository.detach(log) for log in logs]

    async def create_log(
        self,
        process: Process,
        job: ProcessJob,
        message: str,
        log_type: ProcessLogType = ProcessLogType.GENERIC,
    ) -> ProcessJobLog:
        """Append a log entry for a job on this machine."""
        self._require_loaded()
        now = utc_now()
        entry = await self.log_repository.create({
            "process_id": process.id,
            "job_id": job.id,
            "machine": self.machine,
            "type": ProcessLogType(log_type).value,
            "message": message,
            "created_at": now,
            "updated_at": now,
        })
        return self.log_repository.detach(entry)

    async def create_cache(self, process: Process, job: ProcessJob, key: str, value: str) -> ProcessCache:
        """
        Append a cache value for a job on this machine.

        Keys are not unique; writing an existing key adds another entry.
        """
        self._require_loaded()
        now = utc_now()
        entry = await self.cache_repository.create({
            "process_id": process.id,
            "job_id": job.id,
            "machine": self.machine,
            "key": key,
            "value": value,
            "created_at": now,
            "updated_at": now,
        })
        logger.debug(f"Cached '{key}' for {process.name}/{job.name} on {self.machine} (id={entry.id})")
        return self.cache_repository.detach(entry)

    async def get_cache(self, process: Process, job: ProcessJob, key: str) -> List[ProcessCache]:
        """All values stored under ``key`` for this machine, oldest first."""
        self._require_loaded()
        entries = await self.cache_repository.find_entries(process.id, job.id, self.machine, key)
        return [self.cache_repository.detach(entry) for entry in entries]

    async def get_all_cache(self, process: Process, job: ProcessJob) -> List[ProcessCache]:
        """Every cache entry of the job on this machine, oldest first."""
        self._require_loaded()
        entries = await self.cache_repository.find_entries(process.id, job.id, self.machine)
        return [self.cache_repository.detach(entry) for entry in entries]

    async def has_cache_key(self, process: Process, job: ProcessJob, key: str) -> bool:
        self._require_loaded()
        count = await self.cache_repository.count_entries(process.id, job.id, self.machine, key)
        return count > 0

    async def has_cache(self, process: Process, job: ProcessJob) -> bool:
        self._require_loaded()
        count = await self.cache_repository.count_entries(process.id, job.id, self.machine)
        return count > 0

"""
Process manager service.

Resolves process and job names to persisted records, creating them on first
reference. Every record fetched or created goes into the in-memory index so
that later lookups in the same session never reach the database.
"""
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from process_cache.core.logger import LoggerManager
from process_cache.core.process_index import ProcessIndex
from process_cache.db.sync import find_missing_tables
from process_cache.models.process import Process
from process_cache.models.process_job import ProcessJob
from process_cache.repositories.process_job_repository import ProcessJobRepository
from process_cache.repositories.process_repository import ProcessRepository
from process_cache.utils.name_normalizer import normalize_name
from process_cache.utils.timestamps import utc_now

logger = LoggerManager.get_instance().process


class ProcessManager:
    """Get-or-create access to processes and their jobs."""

    def __init__(self, session: AsyncSession, index: Optional[ProcessIndex] = None):
        """
        Initialize the manager.

        Args:
            session: Database session
            index: Index to serve lookups from; a fresh one when omitted
        """
        self.session = session
        self.index = index if index is not None else ProcessIndex()
        self.process_repository = ProcessRepository(session)
        self.job_repository = ProcessJobRepository(session)

    async def load(self) -> None:
        """
        Check that the process cache tables exist.

        Raises:
            RuntimeError: If any table is missing
        """
        connection = await self.session.connection()
        missing = await connection.run_sync(find_missing_tables)
        if missing:
            raise RuntimeError(
                f"Process cache tables missing: {', '.join(missing)}. Run 'process-cache sync' first."
            )

    async def get_process(self, name: str) -> Optional[Process]:
        """
        Get a process by name without creating it.

        Args:
            name: Raw process name; normalized before lookup

        Returns:
            Process if it exists, else None
        """
        name = normalize_name(name)
        process = self.index.get_process(name)
        if process is not None:
            return process

        process = await self.process_repository.get_by_name(name)
        if process is None:
            return None

        self.process_repository.detach(process)
        return self.index.add_process(process)

    async def create_process(self, name: str) -> Process:
        """
        Get a process by name, creating it when it does not exist yet.

        Args:
            name: Raw process name; normalized before lookup and insert

        Returns:
            The existing or newly created process
        """
        name = normalize_name(name)
        process = await self.get_process(name)
        if process is not None:
            return process

        now = utc_now()
        try:
            process = await self.process_repository.create(
                {"name": name, "created_at": now, "updated_at": now}
            )
        except IntegrityError:
            # Another session inserted the same name first
            logger.warning(f"Process '{name}' was created concurrently, fetching it")
            process = await self.process_repository.get_by_name(name)
            if process is None:
                raise
        else:
            logger.info(f"Created process '{name}' (id={process.id})")

        self.process_repository.detach(process)
        return self.index.add_process(process)

    async def get_job(self, process: Process, job_name: str) -> Optional[ProcessJob]:
        """
        Get a job of a process by name without creating it.

        Args:
            process: Owning process
            job_name: Raw job name; normalized before lookup

        Returns:
            ProcessJob if it exists, else None
        """
        job_name = normalize_name(job_name)
        job = self.index.get_job(process, job_name)
        if job is not None:
            return job

        job = await self.job_repository.get_by_process_and_name(process.id, job_name)
        if job is None:
            return None

        self.job_repository.detach(job)
        return self.index.add_job(process, job)

    async def create_job(self, process: Process, job_name: str) -> ProcessJob:
        """
        Get a job of a process by name, creating it when it does not exist yet.

        Args:
            process: Owning process
            job_name: Raw job name; normalized before lookup and insert

        Returns:
            The existing or newly created job
        """
        job_name = normalize_name(job_name)
        job = await self.get_job(process, job_name)
        if job is not None:
            return job

        now = utc_now()
        try:
            job = await self.job_repository.create(
                {"process_id": process.id, "name": job_name, "created_at": now, "updated_at": now}
            )
        except IntegrityError:
            logger.warning(f"Job '{process.name}/{job_name}' was created concurrently, fetching it")
            job = await self.job_repository.get_by_process_and_name(process.id, job_name)
            if job is None:
                raise
        else:
            logger.info(f"Created job '{process.name}/{job_name}' (id={job.id})")

        self.job_repository.detach(job)
        return self.index.add_job(process, job)

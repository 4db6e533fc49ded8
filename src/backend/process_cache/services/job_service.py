"""
Job service.

The entry point for a running job: it resolves its process and job once
through ``load()`` and then reads and writes logs and cache entries scoped
to its machine.

Usage:
    async with database.session() as session:
        job = JobService(session, "nightly-import", "fetch", settings.MACHINE_NAME)
        await job.load()
        if not await job.has_cache_key("cursor"):
            await job.create_cache("cursor", "0")
"""
import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from process_cache.core.exceptions import JobNotLoadedError
from process_cache.core.logger import LoggerManager
from process_cache.models.enums import ProcessLogType
from process_cache.models.process import Process
from process_cache.models.process_cache import ProcessCache
from process_cache.models.process_job import ProcessJob
from process_cache.models.process_job_log import ProcessJobLog
from process_cache.schemas.process_job_log import DEFAULT_JOB_LOG_FILTERS, JobLogFilters
from process_cache.services.machine_service import MachineService
from process_cache.services.process_manager import ProcessManager

logger = LoggerManager.get_instance().process

CacheHook = Callable[["JobService"], Union[None, Awaitable[None]]]


@dataclass
class CacheHooks:
    """
    Callbacks run at the end of ``JobService.load()``.

    Exactly one of them runs: ``on_cache_exist`` when the job already has
    cache entries on this machine, ``on_cache_empty`` otherwise. Either may
    be a plain function or a coroutine function.
    """
    on_cache_exist: Optional[CacheHook] = None
    on_cache_empty: Optional[CacheHook] = None


class JobService:
    """Process, job and machine bound facade over the machine service."""

    def __init__(
        self,
        session: AsyncSession,
        process_name: str,
        job_name: str,
        machine_name: str,
        hooks: Optional[CacheHooks] = None,
        process_manager: Optional[ProcessManager] = None,
    ):
        """
        Initialize the job. Call ``load()`` before anything else.

        Args:
            session: Database session
            process_name: Name of the owning process
            job_name: Name of the job within the process
            machine_name: Identifier of the executing host or instance
            hooks: Callbacks run after loading, depending on whether a cache exists
            process_manager: Manager to share; a new one on the same session when omitted
        """
        self.process_manager = process_manager or ProcessManager(session)
        self.machine = MachineService(session, machine_name, self.process_manager)
        self.process_name = process_name
        self.job_name = job_name
        self.hooks = hooks
        self.process: Optional[Process] = None
        self.process_job: Optional[ProcessJob] = None

        self.cache_by_id: Dict[int, ProcessCache] = {}
        self.cache_tree: Dict[str, Dict[int, ProcessCache]] = {}

    @property
    def loaded(self) -> bool:
        return self.process is not None and self.process_job is not None

    async def load(self) -> None:
        """
        Check the schema, resolve (creating if needed) the process and job,
        then run the cache hooks.

        Calling it again on a loaded job does nothing.
        """
        if self.loaded:
            return

        await self.machine.load()
        self.process = await self.process_manager.create_process(self.process_name)
        self.process_job = await self.process_manager.create_job(self.process, self.job_name)
        logger.debug(
            f"Loaded job {self.process.name}/{self.process_job.name} on {self.machine.machine}"
        )

        if self.hooks is None:
            return

        if await self.has_cache():
            await self._run_hook(self.hooks.on_cache_exist)
        else:
            await self._run_hook(self.hooks.on_cache_empty)

    async def _run_hook(self, hook: Optional[CacheHook]) -> None:
        if hook is None:
            return
        result = hook(self)
        if inspect.isawaitable(result):
            await result

    def _require_loaded(self) -> None:
        if not self.loaded:
            raise JobNotLoadedError(
                f"Job '{self.process_name}/{self.job_name}' used before load()"
            )

    async def sync_cache(self) -> Dict[str, Dict[int, ProcessCache]]:
        """
        Rebuild ``cache_by_id`` and ``cache_tree`` from every cache entry of this job.

        Both views are replaced, never merged with their previous content.

        Returns:
            The rebuilt tree, keyed by cache key then entry id
        """
        self._require_loaded()
        entries = await self.machine.get_all_cache(self.process, self.process_job)

        self.cache_by_id.clear()
        self.cache_tree.clear()
        for entry in entries:
            self.cache_by_id[entry.id] = entry
            self.cache_tree.setdefault(entry.key, {})[entry.id] = entry
        return self.cache_tree

    async def create_log(self, message: str, log_type: ProcessLogType = ProcessLogType.GENERIC) -> ProcessJobLog:
        self._require_loaded()
        return await self.machine.create_log(self.process, self.process_job, message, log_type)

    async def get_logs(self, filters: JobLogFilters = DEFAULT_JOB_LOG_FILTERS) -> List[ProcessJobLog]:
        self._require_loaded()
        return await self.machine.get_job_logs(self.process_job, filters)

    async def create_cache(self, key: str, value: str) -> ProcessCache:
        """
        Store a value under ``key``. Keys are not unique: related values
        should share a key and are all returned by ``get_cache``.
        """
        self._require_loaded()
        return await self.machine.create_cache(self.process, self.process_job, key, value)

    async def get_cache(self, key: str) -> List[ProcessCache]:
        self._require_loaded()
        return await self.machine.get_cache(self.process, self.process_job, key)

    async def has_cache(self) -> bool:
        self._require_loaded()
        return await self.machine.has_cache(self.process, self.process_job)

    async def has_cache_key(self, key: str) -> bool:
        self._require_loaded()
        return await self.machine.has_cache_key(self.process, self.process_job, key)

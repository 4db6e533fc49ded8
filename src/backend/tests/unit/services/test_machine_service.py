"""
Unit tests for MachineService.

Covers append-only cache and log writes, machine scoping and the ordering
and filtering of listings.
"""
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from unittest.mock import patch

from sqlalchemy import func, select

from process_cache.core.exceptions import NotLoadedError
from process_cache.db.session import Database
from process_cache.models.enums import ProcessLogType
from process_cache.models.process_cache import ProcessCache
from process_cache.models.process_job_log import ProcessJobLog
from process_cache.schemas.process_job_log import JobLogFilters
from process_cache.services.machine_service import MachineService
from process_cache.services.process_manager import ProcessManager


async def count_rows(session, model):
    """Count every row of a model."""
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest_asyncio.fixture
async def scope(session):
    """A process with two jobs and a machine service for 'worker-1'."""
    manager = ProcessManager(session)
    process = await manager.create_process("etl")
    extract = await manager.create_job(process, "extract")
    load = await manager.create_job(process, "load")
    machine = MachineService(session, "worker-1", manager)
    await machine.load()
    return machine, process, extract, load


class TestMachineServiceCache:
    """Cache entry operations."""

    @pytest.mark.asyncio
    async def test_create_cache_appends_never_overwrites(self, scope):
        """Test that writing an existing key adds another entry."""
        machine, process, job, _ = scope

        await machine.create_cache(process, job, "k", "v1")
        await machine.create_cache(process, job, "k", "v2")

        entries = await machine.get_cache(process, job, "k")
        assert [entry.value for entry in entries] == ["v1", "v2"]
        assert entries[0].id < entries[1].id

    @pytest.mark.asyncio
    async def test_create_cache_tags_scope(self, scope):
        """Test that a cache entry records its process, job and machine."""
        machine, process, job, _ = scope

        entry = await machine.create_cache(process, job, "cursor", "10")

        assert entry.process_id == process.id
        assert entry.job_id == job.id
        assert entry.machine == "worker-1"
        assert entry.created_at is not None

    @pytest.mark.asyncio
    async def test_get_cache_unknown_key_is_empty(self, scope):
        """Test that an unknown key yields an empty list."""
        machine, process, job, _ = scope

        assert await machine.get_cache(process, job, "missing") == []

    @pytest.mark.asyncio
    async def test_has_cache_before_and_after_write(self, scope):
        """Test has_cache flips once an entry is written."""
        machine, process, job, _ = scope

        assert await machine.has_cache(process, job) is False

        await machine.create_cache(process, job, "k", "v")

        assert await machine.has_cache(process, job) is True

    @pytest.mark.asyncio
    async def test_has_cache_key(self, scope):
        """Test has_cache_key for present and absent keys."""
        machine, process, job, _ = scope
        await machine.create_cache(process, job, "present", "v")

        assert await machine.has_cache_key(process, job, "present") is True
        assert await machine.has_cache_key(process, job, "absent") is False

    @pytest.mark.asyncio
    async def test_cache_is_scoped_to_machine(self, session, scope):
        """Test that another machine's entries are invisible."""
        machine, process, job, _ = scope
        other = MachineService(session, "worker-2", machine.process_manager)
        await other.load()
        await other.create_cache(process, job, "k", "theirs")

        assert await machine.has_cache(process, job) is False
        assert await machine.has_cache_key(process, job, "k") is False
        assert await machine.get_cache(process, job, "k") == []

    @pytest.mark.asyncio
    async def test_cache_is_scoped_to_job(self, scope):
        """Test that another job's entries are invisible."""
        machine, process, extract, load = scope
        await machine.create_cache(process, extract, "k", "v")

        assert await machine.has_cache(process, load) is False
        assert await machine.get_cache(process, load, "k") == []

    @pytest.mark.asyncio
    async def test_get_all_cache_in_creation_order(self, scope):
        """Test that get_all_cache lists every entry oldest first."""
        machine, process, job, _ = scope
        for key, value in [("a", "1"), ("b", "2"), ("a", "3")]:
            await machine.create_cache(process, job, key, value)

        entries = await machine.get_all_cache(process, job)

        assert [(entry.key, entry.value) for entry in entries] == [("a", "1"), ("b", "2"), ("a", "3")]

    @pytest.mark.asyncio
    async def test_get_cache_orders_by_created_at(self, scope):
        """Test ordering by creation time rather than insert order."""
        machine, process, job, _ = scope
        base = datetime(2026, 1, 1, 12, 0, 0)

        # Written out of chronological order
        with patch("process_cache.services.machine_service.utc_now", return_value=base + timedelta(seconds=5)):
            await machine.create_cache(process, job, "k", "later")
        with patch("process_cache.services.machine_service.utc_now", return_value=base):
            await machine.create_cache(process, job, "k", "earlier")

        entries = await machine.get_cache(process, job, "k")

        assert [entry.value for entry in entries] == ["earlier", "later"]


class TestMachineServiceLogs:
    """Log entry operations."""

    @pytest.mark.asyncio
    async def test_create_log_defaults_to_generic(self, scope):
        """Test that a log entry defaults to the generic type."""
        machine, process, job, _ = scope

        entry = await machine.create_log(process, job, "started")

        assert entry.type == ProcessLogType.GENERIC.value
        assert entry.message == "started"
        assert entry.machine == "worker-1"

    @pytest.mark.asyncio
    async def test_get_job_logs_ascending(self, scope):
        """Test that job logs are listed oldest first."""
        machine, process, job, _ = scope
        for message in ("one", "two", "three"):
            await machine.create_log(process, job, message)

        logs = await machine.get_job_logs(job)

        assert [log.message for log in logs] == ["one", "two", "three"]
        assert all(a.created_at <= b.created_at for a, b in zip(logs, logs[1:]))

    @pytest.mark.asyncio
    async def test_get_process_logs_spans_jobs(self, scope):
        """Test that process logs include every job of the process."""
        machine, process, extract, load = scope
        await machine.create_log(process, extract, "extracting")
        await machine.create_log(process, load, "loading")

        process_logs = await machine.get_process_logs(process)
        job_logs = await machine.get_job_logs(load)

        assert [log.message for log in process_logs] == ["extracting", "loading"]
        assert [log.message for log in job_logs] == ["loading"]

    @pytest.mark.asyncio
    async def test_type_filter(self, scope):
        """Test filtering logs by type."""
        machine, process, job, _ = scope
        await machine.create_log(process, job, "fine")
        await machine.create_log(process, job, "careful", ProcessLogType.WARNING)
        await machine.create_log(process, job, "broken", ProcessLogType.ERROR)
        await machine.create_log(process, job, "careful again", ProcessLogType.WARNING)

        warnings = await machine.get_job_logs(job, JobLogFilters(type=ProcessLogType.WARNING))
        errors = await machine.get_process_logs(process, JobLogFilters(type="ERROR"))

        assert [log.message for log in warnings] == ["careful", "careful again"]
        assert [log.message for log in errors] == ["broken"]

    @pytest.mark.asyncio
    async def test_offset_and_limit(self, scope):
        """Test log pagination with offset and limit."""
        machine, process, job, _ = scope
        for i in range(5):
            await machine.create_log(process, job, f"message {i}")

        page = await machine.get_job_logs(job, JobLogFilters(offset=1, limit=2))
        tail = await machine.get_process_logs(process, JobLogFilters(offset=3))

        assert [log.message for log in page] == ["message 1", "message 2"]
        assert [log.message for log in tail] == ["message 3", "message 4"]

    @pytest.mark.asyncio
    async def test_logs_are_scoped_to_machine(self, session, scope):
        """Test that another machine's logs are invisible."""
        machine, process, job, _ = scope
        other = MachineService(session, "worker-2", machine.process_manager)
        await other.load()
        await other.create_log(process, job, "not mine")

        assert await machine.get_job_logs(job) == []
        assert await machine.get_process_logs(process) == []




class TestMachineServiceLoad:
    """load() and use-before-load behaviour."""

    @pytest.mark.asyncio
    async def test_default_process_manager_shares_session(self, session):
        """Test that an omitted process manager is built on the same session."""
        machine = MachineService(session, "worker-1")

        assert isinstance(machine.process_manager, ProcessManager)
        assert machine.process_manager.session is session

    @pytest.mark.asyncio
    async def test_load_marks_service_loaded(self, session):
        """Test that load checks the schema and marks the service loaded."""
        machine = MachineService(session, "worker-1")
        assert machine.loaded is False

        await machine.load()

        assert machine.loaded is True

    @pytest.mark.asyncio
    async def test_load_without_tables_stays_unloaded(self):
        """Test that a failed schema check leaves the service unusable."""
        database = Database("sqlite+aiosqlite://")
        try:
            async with database.session() as session:
                machine = MachineService(session, "worker-1")

                with pytest.raises(RuntimeError, match="process_cache"):
                    await machine.load()

                assert machine.loaded is False
        finally:
            await database.dispose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("call", [
        lambda machine, process, job: machine.create_cache(process, job, "k", "v"),
        lambda machine, process, job: machine.get_cache(process, job, "k"),
        lambda machine, process, job: machine.get_all_cache(process, job),
        lambda machine, process, job: machine.has_cache(process, job),
        lambda machine, process, job: machine.has_cache_key(process, job, "k"),
        lambda machine, process, job: machine.create_log(process, job, "message"),
        lambda machine, process, job: machine.get_job_logs(job),
        lambda machine, process, job: machine.get_process_logs(process),
    ])
    async def test_use_before_load_fails_fast(self, session, call):
        """Test that every operation refuses to run before load()."""
        manager = ProcessManager(session)
        process = await manager.create_process("etl")
        job = await manager.create_job(process, "extract")
        machine = MachineService(session, "worker-1", manager)

        with pytest.raises(NotLoadedError):
            await call(machine, process, job)

        assert await count_rows(session, ProcessCache) == 0
        assert await count_rows(session, ProcessJobLog) == 0


class TestMachineServiceDetachedRows:
    """Returned rows stay readable after the session rolls back."""

    @pytest.mark.asyncio
    async def test_cache_entries_survive_rollback(self, session, scope):
        """Test that created and listed cache entries keep their values."""
        machine, process, job, _ = scope
        created = await machine.create_cache(process, job, "cursor", "10")
        listed = await machine.get_cache(process, job, "cursor")
        everything = await machine.get_all_cache(process, job)

        await session.rollback()

        assert created.value == "10"
        assert [entry.value for entry in listed] == ["10"]
        assert [entry.key for entry in everything] == ["cursor"]

    @pytest.mark.asyncio
    async def test_log_entries_survive_rollback(self, session, scope):
        """Test that created and listed log entries keep their values."""
        machine, process, job, _ = scope
        created = await machine.create_log(process, job, "started")
        job_logs = await machine.get_job_logs(job)
        process_logs = await machine.get_process_logs(process)

        await session.rollback()

        assert created.message == "started"
        assert [log.message for log in job_logs] == ["started"]
        assert [log.type for log in process_logs] == [ProcessLogType.GENERIC.value]

"""
Repository for process job logs.

Logs are only ever appended and listed; every listing is ordered by
creation time ascending.
"""
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from process_cache.core.base_repository import BaseRepository
from process_cache.models.process_job_log import ProcessJobLog


class ProcessJobLogRepository(BaseRepository[ProcessJobLog]):
    """
    Repository for ProcessJobLog model with machine-scoped listings.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(ProcessJobLog, session)

    async def find_logs(
        self,
        process_id: int,
        machine: str,
        job_id: Optional[int] = None,
        log_type: Optional[str] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[ProcessJobLog]:
        """
        List logs for a process (and optionally one job) on one machine.

        Args:
            process_id: ID of the process
            machine: Machine identifier
            job_id: Restrict to this job when given
            log_type: Restrict to this log type when given
            offset: Number of entries to skip
            limit: Maximum number of entries

        Returns:
            Log entries ordered by creation time ascending
        """
        criteria = [
            self.model.process_id == process_id,
            self.model.machine == machine,
        ]
        if job_id is not None:
            criteria.append(self.model.job_id == job_id)
        if log_type is not None:
            criteria.append(self.model.type == log_type)

        return await self.find_all(
            *criteria,
            order_by=[self.model.created_at.asc(), self.model.id.asc()],
            limit=limit,
            offset=offset,
        )

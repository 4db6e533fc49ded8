from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from process_cache.core.base_repository import BaseRepository
from process_cache.models.process_job import ProcessJob


class ProcessJobRepository(BaseRepository[ProcessJob]):
    """
    Repository for ProcessJob model.
    Inherits base CRUD operations from BaseRepository.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(ProcessJob, session)

    async def get_by_process_and_name(self, process_id: int, name: str) -> Optional[ProcessJob]:
        """
        Get a job by owning process and exact (already normalized) name.

        Args:
            process_id: ID of the owning process
            name: Job name

        Returns:
            ProcessJob if found, else None
        """
        return await self.find_one(
            self.model.process_id == process_id,
            self.model.name == name,
        )

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from process_cache.core.base_repository import BaseRepository
from process_cache.models.process import Process


class ProcessRepository(BaseRepository[Process]):
    """
    Repository for Process model.
    Inherits base CRUD operations from BaseRepository.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Process, session)

    async def get_by_name(self, name: str) -> Optional[Process]:
        """
        Get a process by its exact (already normalized) name.

        Args:
            name: Process name

        Returns:
            Process if found, else None
        """
        return await self.find_one(self.model.name == name)

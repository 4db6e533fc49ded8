"""
Repository for process cache entries.

Entries are scoped by (process, job, machine). Keys repeat: a key lookup
returns every value ever written for it, oldest first.
"""
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from process_cache.core.base_repository import BaseRepository
from process_cache.models.process_cache import ProcessCache


class ProcessCacheRepository(BaseRepository[ProcessCache]):
    """
    Repository for ProcessCache model.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(ProcessCache, session)

    def _scope(self, process_id: int, job_id: int, machine: str, key: Optional[str] = None) -> List[Any]:
        criteria = [
            self.model.process_id == process_id,
            self.model.job_id == job_id,
            self.model.machine == machine,
        ]
        if key is not None:
            criteria.append(self.model.key == key)
        return criteria

    async def find_entries(
        self, process_id: int, job_id: int, machine: str, key: Optional[str] = None
    ) -> List[ProcessCache]:
        """
        Get cache entries for a scope, optionally restricted to one key.

        Returns:
            Cache entries ordered by creation time ascending
        """
        return await self.find_all(
            *self._scope(process_id, job_id, machine, key),
            order_by=[self.model.created_at.asc(), self.model.id.asc()],
        )

    async def count_entries(
        self, process_id: int, job_id: int, machine: str, key: Optional[str] = None
    ) -> int:
        """Count cache entries for a scope, optionally restricted to one key."""
        return await self.count(*self._scope(process_id, job_id, machine, key))

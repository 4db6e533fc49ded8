"""
Base repository.

Generic async data access over a single SQLAlchemy model. This is the whole
storage boundary the services rely on: find one, find all, create, count.
Errors are rolled back and re-raised unchanged.
"""
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from process_cache.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base class for all repositories.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize the repository with model and session.

        Args:
            model: SQLAlchemy model class
            session: SQLAlchemy async session
        """
        self.model = model
        self.session = session

    async def get(self, id: Any) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Args:
            id: ID of the record to get

        Returns:
            The record if found, else None
        """
        return await self.find_one(self.model.id == id)

    async def find_one(self, *criteria: Any) -> Optional[ModelType]:
        """
        Get the first record matching every criterion.

        Args:
            criteria: SQLAlchemy filter expressions

        Returns:
            The record if found, else None
        """
        try:
            query = select(self.model).where(*criteria).limit(1)
            result = await self.session.execute(query)
            return result.scalars().first()
        except Exception:
            await self.session.rollback()
            raise

    async def find_all(
        self,
        *criteria: Any,
        order_by: Optional[Sequence[Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Get every record matching the criteria.

        Args:
            criteria: SQLAlchemy filter expressions
            order_by: Columns or clauses to order by
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            List of records
        """
        try:
            query = select(self.model).where(*criteria)
            if order_by:
                query = query.order_by(*order_by)
            if offset:
                query = query.offset(offset)
            if limit is not None:
                query = query.limit(limit)
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except Exception:
            await self.session.rollback()
            raise

    async def count(self, *criteria: Any) -> int:
        """
        Count the records matching the criteria.

        Returns:
            Number of matching records
        """
        try:
            query = select(func.count()).select_from(self.model).where(*criteria)
            result = await self.session.execute(query)
            return int(result.scalar_one())
        except Exception:
            await self.session.rollback()
            raise

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create and commit a new record.

        Args:
            obj_in: Dictionary of values to create model with

        Returns:
            The created model instance
        """
        try:
            db_obj = self.model(**obj_in)
            self.session.add(db_obj)
            await self.session.flush()
            await self.session.commit()
            await self.session.refresh(db_obj)
            return db_obj
        except Exception:
            await self.session.rollback()
            raise

    def detach(self, db_obj: ModelType) -> ModelType:
        """
        Remove a loaded instance from the session.

        The instance keeps its loaded attributes and is no longer expired by
        a later rollback of this session.
        """
        if db_obj in self.session:
            self.session.expunge(db_obj)
        return db_obj

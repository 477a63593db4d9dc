"""
Base repository.

Shared lookups and writes for the indexer tables. Writes only flush;
committing is left to the caller so that each reconciled event decides
its own transaction boundary.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpnet.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Repository over one mapped table.

    Example:
        class TransactionRepository(BaseRepository[Transaction]):
            def __init__(self, session: AsyncSession):
                super().__init__(Transaction, session)
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        """
        Initialize repository.

        Args:
            model: Mapped class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Get the row matching column filters.

        Args:
            **filters: Column equality filters on unique columns

        Returns:
            Row or None
        """
        result = await self.session.execute(
            select(self.model).filter_by(**filters)
        )
        return result.scalar_one_or_none()

    async def exists(self, **filters: Any) -> bool:
        """True if any row matches the column filters."""
        stmt = select(exists().where(
            *(getattr(self.model, column) == value for column, value in filters.items())
        ))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def create(self, **data: Any) -> ModelType:
        """
        Insert a row and flush it.

        Raises:
            IntegrityError: A unique column (address, transaction hash)
                already holds this value
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def save(self, entity: ModelType) -> ModelType:
        """Flush pending changes of a loaded or new row."""
        self.session.add(entity)
        await self.session.flush()
        return entity

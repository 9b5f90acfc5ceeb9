"""Base repository pattern for all data access."""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.records import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Common queries over one model.

    Repositories never commit on their own except where an operation must be
    atomic by itself (see the subclasses); callers own the transaction.
    """

    model: Type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    async def get_by(self, **filters) -> Optional[ModelType]:
        """Get the single record matching every filter, fresh from the store."""
        query = select(self.model).execution_options(populate_existing=True)
        for key, value in filters.items():
            query = query.where(getattr(self.model, key) == value)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        await self.session.commit()

"""Base repository: generic entity access shared by the concrete repositories."""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_entity_by_id, create and delete_by_id.

    Entity methods return ORM objects for use inside repositories; public read
    methods of subclasses map to application DTOs.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_entity_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key (fresh from the database), or None."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model)
            .where(model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and load server-generated columns."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete_by_id(self, entity_id: str) -> bool:
        """Delete by primary key with a single DELETE (database cascades apply)."""
        model: Any = self.model
        result = await self.db.execute(delete(self.model).where(model.id == entity_id))
        return (result.rowcount or 0) > 0

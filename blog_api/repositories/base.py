"""
Base Repository

Base class for all repositories.
Provides common database operations.
"""

from typing import Generic, TypeVar, Type, Optional, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from blog_api.db.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class with common CRUD operations.

    All repositories should inherit from this class.
    """
    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # -----------------------------
    # Get Element By id
    # -----------------------------
    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """Get a record by primary key."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    # -----------------------------
    # Create Single Record
    # -----------------------------
    async def create(self, **kwargs) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.commit()
        await self.db.refresh(instance)
        return instance

    # -----------------------------
    # Update record
    # -----------------------------
    async def save(self, instance: ModelType) -> ModelType:
        """Persist changes already applied to a loaded instance."""
        await self.db.commit()
        await self.db.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **kwargs) -> ModelType:
        """Set the given fields on an instance and persist it."""
        for key, value in kwargs.items():
            setattr(instance, key, value)
        return await self.save(instance)

    # This used to Delete
    async def delete(self, instance: ModelType) -> None:
        """Physically remove a record."""
        await self.db.delete(instance)
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

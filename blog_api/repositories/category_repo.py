"""
Category Repository

Data access layer for Category model. Categories are managed out of band,
so only the inherited lookups and a plain create are used.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.repositories.base import BaseRepository
from blog_api.models import Category


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Category, db)

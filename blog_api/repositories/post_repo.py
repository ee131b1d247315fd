"""
Post Repository

Data access layer for Post model.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from blog_api.repositories.base import BaseRepository
from blog_api.models import Category, Post


class PostRepository(BaseRepository[Post]):
    """Repository for Post model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Post, db)

    async def get_active(self, post_id: int, with_author: bool = False) -> Optional[Post]:
        """
        Get a post that has not been soft-deleted.

        Args:
            post_id: The post's ID
            with_author: Eager-load the author relationship
        """
        stmt = select(Post).where(Post.id == post_id, Post.is_deleted.is_(False))
        if with_author:
            stmt = stmt.options(selectinload(Post.author))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(
        self,
        post_id: int,
        author_id: int,
        include_deleted: bool = False
    ) -> Optional[Post]:
        """
        Ownership-scoped lookup: the post must belong to ``author_id``.

        Soft-deleted posts are skipped unless ``include_deleted`` is set.
        """
        stmt = select(Post).where(Post.id == post_id, Post.author_id == author_id)
        if not include_deleted:
            stmt = stmt.where(Post.is_deleted.is_(False))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def count_active(self) -> int:
        """Count the posts that have not been soft-deleted."""
        result = await self.db.execute(
            select(func.count(Post.id)).where(Post.is_deleted.is_(False))
        )
        return result.scalar() or 0

    async def list_active(self, offset: int, limit: int) -> List[Post]:
        """Page through non-deleted posts, newest first."""
        stmt = (
            select(Post)
            .where(Post.is_deleted.is_(False))
            .options(selectinload(Post.author))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_active_by_category(self, category_name: str) -> int:
        result = await self.db.execute(
            select(func.count(Post.id))
            .join(Category, Post.category_id == Category.id)
            .where(Post.is_deleted.is_(False), Category.name == category_name)
        )
        return result.scalar() or 0

    async def list_active_by_category(
        self,
        category_name: str,
        offset: int,
        limit: int
    ) -> List[Post]:
        """Page through non-deleted posts of the category with the given name."""
        stmt = (
            select(Post)
            .join(Category, Post.category_id == Category.id)
            .where(Post.is_deleted.is_(False), Category.name == category_name)
            .options(selectinload(Post.author), selectinload(Post.category))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

"""
Comment Repository

Data access layer for Comment model.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from blog_api.repositories.base import BaseRepository
from blog_api.models import Comment


class CommentRepository(BaseRepository[Comment]):
    """Repository for Comment model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Comment, db)

    async def get_with_author(self, comment_id: int) -> Optional[Comment]:
        """Get a comment with its author loaded."""
        result = await self.db.execute(
            select(Comment)
            .where(Comment.id == comment_id)
            .options(selectinload(Comment.author))
        )
        return result.scalar_one_or_none()

    async def get_owned(self, comment_id: int, author_id: int) -> Optional[Comment]:
        """Ownership-scoped lookup: the comment must belong to ``author_id``."""
        result = await self.db.execute(
            select(Comment).where(
                Comment.id == comment_id,
                Comment.author_id == author_id,
            )
        )
        return result.scalar_one_or_none()

    async def count_for_post(self, post_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Comment.id)).where(Comment.post_id == post_id)
        )
        return result.scalar() or 0

    async def list_for_post(self, post_id: int, offset: int, limit: int) -> List[Comment]:
        """Page through the comments of a post, newest first."""
        result = await self.db.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .options(selectinload(Comment.author))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

"""
Comment Service
Business logic for comment operations.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core.config import settings
from blog_api.core.exceptions import NotFoundError, ValidationFailedError
from blog_api.repositories.comment_repo import CommentRepository
from blog_api.repositories.post_repo import PostRepository
from blog_api.schemas.comment import (
    CommentCreate,
    CommentUpdate,
    CommentResponse,
    CommentDetail,
)
from blog_api.schemas.common import DB_INT_MAX, DB_INT_MIN
from blog_api.services.post_service import check_page_in_range

logger = logging.getLogger(__name__)

COMMENT_NOT_FOUND_OR_UNAUTHORIZED = "Comment not found or unauthorized"


def parse_post_id(raw: Optional[str]) -> int:
    """
    The post_id query value must be present and a whole number. Ids outside
    the key column range cannot match a post.
    """
    try:
        post_id = int(raw.strip())
    except (AttributeError, ValueError):
        raise ValidationFailedError("post_id is required and must be a valid number")
    if not DB_INT_MIN <= post_id <= DB_INT_MAX:
        raise NotFoundError("Post not found")
    return post_id


class CommentService:
    """Service class for comment operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.comment_repo = CommentRepository(db)
        self.post_repo = PostRepository(db)

    # ============================================================
    # Create Comment
    # ============================================================
    async def create_comment(self, data: CommentCreate, author_id: int) -> CommentResponse:
        """
        Attach a comment to a post that has not been deleted.

        Raises:
            NotFoundError: If the post is missing or soft-deleted
        """
        if not await self.post_repo.get_active(data.post_id):
            raise NotFoundError("Post not found")

        comment = await self.comment_repo.create(
            comment=data.comment,
            post_id=data.post_id,
            author_id=author_id,
        )
        logger.info(f"Comment created: id={comment.id} post={data.post_id}")
        return CommentResponse.model_validate(comment)

    # ============================================================
    # Read Comments
    # ============================================================
    async def list_post_comments(
        self,
        raw_post_id: Optional[str],
        page: int
    ) -> Tuple[List[CommentDetail], int]:
        """
        Get one page of comments for a post.

        Raises:
            ValidationFailedError: If post_id is missing or not a number
            NotFoundError: If the post is gone or has no comments
            InvalidPageError: If the page starts past the last comment
        """
        post_id = parse_post_id(raw_post_id)
        if not await self.post_repo.get_active(post_id):
            raise NotFoundError("Post not found")

        limit = settings.COMMENTS_PAGE_SIZE
        offset = (page - 1) * limit
        total = await self.comment_repo.count_for_post(post_id)
        if total == 0:
            raise NotFoundError("No comments found for this post")
        check_page_in_range(offset, total)

        comments = await self.comment_repo.list_for_post(post_id, offset, limit)
        return [CommentDetail.model_validate(c) for c in comments], total

    async def get_comment(self, comment_id: int) -> CommentDetail:
        comment = await self.comment_repo.get_with_author(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        return CommentDetail.model_validate(comment)

    # ============================================================
    # Update / Delete Comment
    # ============================================================
    async def update_comment(
        self,
        comment_id: int,
        data: CommentUpdate,
        author_id: int
    ) -> CommentResponse:
        comment = await self.comment_repo.get_owned(comment_id, author_id)
        if not comment:
            raise NotFoundError(COMMENT_NOT_FOUND_OR_UNAUTHORIZED)

        comment = await self.comment_repo.update(comment, comment=data.comment)
        return CommentResponse.model_validate(comment)

    async def delete_comment(self, comment_id: int, author_id: int) -> None:
        """Physically remove a comment owned by ``author_id``."""
        comment = await self.comment_repo.get_owned(comment_id, author_id)
        if not comment:
            raise NotFoundError(COMMENT_NOT_FOUND_OR_UNAUTHORIZED)

        await self.comment_repo.delete(comment)
        logger.info(f"Comment deleted: id={comment_id} author={author_id}")

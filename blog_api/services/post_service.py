"""
Post Service
Business logic for post operations.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core.config import settings
from blog_api.core.exceptions import (
    InvalidPageError,
    MissingFieldsError,
    NotFoundError,
    ValidationFailedError,
)
from blog_api.repositories.category_repo import CategoryRepository
from blog_api.repositories.post_repo import PostRepository
from blog_api.schemas.common import url_to_str
from blog_api.schemas.post import (
    PostCreate,
    PostUpdate,
    PostResponse,
    PostDetail,
    CategoryPostDetail,
    PostDeleted,
    PostRemoved,
)

logger = logging.getLogger(__name__)

POST_NOT_FOUND_OR_UNAUTHORIZED = "Post not found or unauthorized"


def check_page_in_range(offset: int, total: int) -> None:
    """A page that starts past the last row is an error, unless there are no rows."""
    if offset >= total and total > 0:
        raise InvalidPageError()


class PostService:
    """Service class for post operations."""

    def __init__(self, db: AsyncSession):
        """Initialize with database session."""
        self.db = db
        self.post_repo = PostRepository(db)
        self.category_repo = CategoryRepository(db)

    # ============================================================
    # Create Post
    # ============================================================
    async def create_post(self, post_data: PostCreate, author_id: int) -> PostResponse:
        """
        Create a new post owned by ``author_id``.

        Raises:
            ValidationFailedError: If the category does not exist
        """
        await self._ensure_category(post_data.category_id)

        post = await self.post_repo.create(
            title=post_data.title,
            content=post_data.content,
            image_url=url_to_str(post_data.image_url),
            category_id=post_data.category_id,
            author_id=author_id,
        )
        logger.info(f"Post created: id={post.id} author={author_id}")
        return PostResponse.model_validate(post)

    # ============================================================
    # Read Posts
    # ============================================================
    async def list_posts(self, page: int) -> Tuple[List[PostDetail], int]:
        """
        Get one page of non-deleted posts.

        Returns:
            The page of posts and the total count

        Raises:
            InvalidPageError: If the page starts past the last post
        """
        limit = settings.POSTS_PAGE_SIZE
        offset = (page - 1) * limit
        total = await self.post_repo.count_active()
        check_page_in_range(offset, total)
        if total == 0:
            return [], 0

        posts = await self.post_repo.list_active(offset, limit)
        return [PostDetail.model_validate(p) for p in posts], total

    async def list_posts_by_category(
        self,
        category_name: Optional[str],
        page: int
    ) -> Tuple[List[CategoryPostDetail], int]:
        """
        Get one page of non-deleted posts in the named category.

        Raises:
            MissingFieldsError: If no category name is given
            InvalidPageError: If the page starts past the last post
            NotFoundError: If the category has no posts
        """
        category_name = (category_name or "").strip()
        if not category_name:
            raise MissingFieldsError("category_name is required")

        limit = settings.CATEGORY_POSTS_PAGE_SIZE
        offset = (page - 1) * limit
        total = await self.post_repo.count_active_by_category(category_name)
        check_page_in_range(offset, total)
        if total == 0:
            raise NotFoundError(f"No posts found in category '{category_name}'")

        posts = await self.post_repo.list_active_by_category(category_name, offset, limit)
        return [CategoryPostDetail.model_validate(p) for p in posts], total

    async def get_post(self, post_id: int) -> PostDetail:
        """
        Get a non-deleted post by ID.

        Raises:
            NotFoundError: If the post is missing or soft-deleted
        """
        post = await self.post_repo.get_active(post_id, with_author=True)
        if not post:
            raise NotFoundError("Post not found")
        return PostDetail.model_validate(post)

    # ============================================================
    # Update Post
    # ============================================================
    async def update_post(
        self,
        post_id: int,
        post_data: PostUpdate,
        author_id: int
    ) -> PostResponse:
        """
        Update a post, verifying ownership.

        Only provided fields will be updated.

        Raises:
            NotFoundError: If not found, not owned or already soft-deleted
            ValidationFailedError: If a new category does not exist
        """
        post = await self.post_repo.get_owned(post_id, author_id)
        if not post:
            raise NotFoundError(POST_NOT_FOUND_OR_UNAUTHORIZED)

        update_data = post_data.model_dump(mode="json", exclude_unset=True)
        if update_data.get("category_id") is not None:
            await self._ensure_category(update_data["category_id"])

        post = await self.post_repo.update(post, **update_data)
        return PostResponse.model_validate(post)

    # ============================================================
    # Delete Post
    # ============================================================
    async def soft_delete_post(self, post_id: int, author_id: int) -> PostDeleted:
        """
        Flag a post as deleted. The row stays in the table.

        Raises:
            NotFoundError: If not found, not owned or already soft-deleted
        """
        post = await self.post_repo.get_owned(post_id, author_id)
        if not post:
            raise NotFoundError(POST_NOT_FOUND_OR_UNAUTHORIZED)

        await self.post_repo.update(post, is_deleted=True)
        logger.info(f"Post soft-deleted: id={post_id} author={author_id}")
        return PostDeleted(id=post.id, title=post.title, deleted_at=datetime.now(timezone.utc))

    async def hard_delete_post(self, post_id: int, author_id: int) -> PostRemoved:
        """
        Permanently remove a post, verifying ownership.

        Soft-deleted posts can still be removed. The database deletes
        the post's comments along with it.

        Raises:
            NotFoundError: If not found or not owned
        """
        post = await self.post_repo.get_owned(post_id, author_id, include_deleted=True)
        if not post:
            raise NotFoundError(POST_NOT_FOUND_OR_UNAUTHORIZED)

        removed = PostRemoved(id=post.id, title=post.title)
        await self.post_repo.delete(post)
        logger.info(f"Post hard-deleted: id={post_id} author={author_id}")
        return removed

    # ============================================================
    # Helper Methods
    # ============================================================
    async def _ensure_category(self, category_id: Optional[int]) -> None:
        category = await self.category_repo.get_by_id(category_id) if category_id is not None else None
        if not category:
            raise ValidationFailedError("Invalid category ID. Category does not exist.")

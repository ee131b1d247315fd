"""
Post Endpoints
HTTP API for post management.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.api.deps import get_current_identity
from blog_api.core.config import settings
from blog_api.core.responses import build_pagination, envelope, parse_page
from blog_api.db.database import get_db
from blog_api.schemas.common import DB_INT_MAX, DB_INT_MIN
from blog_api.schemas.post import PostCreate, PostUpdate
from blog_api.schemas.user import TokenIdentity
from blog_api.services.post_service import PostService

# ============================================================
# Router Setup
# ============================================================
router = APIRouter(tags=["Posts"])


# ============================================================
# Create Post
# ============================================================
@router.post(
    "/create-posts",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Post created successfully"},
        400: {"description": "Validation failed or unknown category"},
        401: {"description": "Missing or invalid token"},
    }
)
async def create_post(
    post_data: PostCreate,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new post.

    The post will be owned by the authenticated user.
    """
    post_service = PostService(db)
    post = await post_service.create_post(post_data, identity.id)
    return envelope(
        message="Post created successfully",
        data=post,
        status_code=status.HTTP_201_CREATED,
    )


# ============================================================
# List Posts
# ============================================================
@router.get(
    "/get-all-posts",
    responses={
        200: {"description": "One page of posts"},
        400: {"description": "Requested page is out of range"},
    }
)
async def list_posts(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get all posts that have not been deleted, newest first.
    """
    current_page = parse_page(page)
    post_service = PostService(db)
    posts, total = await post_service.list_posts(current_page)
    return envelope(
        data=posts,
        pagination=build_pagination(current_page, settings.POSTS_PAGE_SIZE, total, "totalPosts"),
    )


@router.get("/get-all-category-posts")
async def list_category_posts(
    category_name: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Get posts of one category, looked up by name."""
    current_page = parse_page(page)
    post_service = PostService(db)
    posts, total = await post_service.list_posts_by_category(category_name, current_page)
    return envelope(
        data=posts,
        pagination=build_pagination(
            current_page, settings.CATEGORY_POSTS_PAGE_SIZE, total, "totalPosts"
        ),
    )


# ============================================================
# Get Single Post
# ============================================================
@router.get(
    "/get-single-post/{post_id}",
    responses={
        200: {"description": "Post details"},
        404: {"description": "Post not found"},
    }
)
async def get_post(
    post_id: int = Path(..., ge=DB_INT_MIN, le=DB_INT_MAX),
    db: AsyncSession = Depends(get_db)
):
    post_service = PostService(db)
    post = await post_service.get_post(post_id)
    return envelope(data=post)


# ============================================================
# Update Post
# ============================================================
@router.post(
    "/update-posts/{post_id}",
    responses={
        200: {"description": "Post updated successfully"},
        404: {"description": "Post not found or not owned by the caller"},
    }
)
async def update_post(
    post_data: PostUpdate,
    post_id: int = Path(..., ge=DB_INT_MIN, le=DB_INT_MAX),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a post.

    Only provided fields will be updated.
    """
    post_service = PostService(db)
    post = await post_service.update_post(post_id, post_data, identity.id)
    return envelope(message="Post updated successfully", data=post)


# ============================================================
# Delete Post
# ============================================================
@router.post("/soft-delete-posts/{post_id}")
async def soft_delete_post(
    post_id: int = Path(..., ge=DB_INT_MIN, le=DB_INT_MAX),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """
    Hide a post. It no longer shows up in reads but stays in the database.
    """
    post_service = PostService(db)
    deleted = await post_service.soft_delete_post(post_id, identity.id)
    return envelope(message="Post deleted successfully", data=deleted)


@router.post("/hard-delete-posts/{post_id}")
async def hard_delete_post(
    post_id: int = Path(..., ge=DB_INT_MIN, le=DB_INT_MAX),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """
    Permanently delete a post.

    Its comments go with it (ON DELETE CASCADE on comments.post_id).
    This action cannot be undone.
    """
    post_service = PostService(db)
    removed = await post_service.hard_delete_post(post_id, identity.id)
    return envelope(message="Post permanently deleted", data=removed)

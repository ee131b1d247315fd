"""
Comment Endpoints
HTTP API for comments on posts.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.api.deps import get_current_identity
from blog_api.core.config import settings
from blog_api.core.responses import build_pagination, envelope, parse_page
from blog_api.db.database import get_db
from blog_api.schemas.comment import CommentCreate, CommentUpdate
from blog_api.schemas.common import DB_INT_MAX, DB_INT_MIN
from blog_api.schemas.user import TokenIdentity
from blog_api.services.comment_service import CommentService

router = APIRouter(tags=["Comments"])


# ============================================================
# Create Comment
# ============================================================
@router.post(
    "/create-comments",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Comment created successfully"},
        404: {"description": "Post not found"},
    }
)
async def create_comment(
    data: CommentCreate,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    comment_service = CommentService(db)
    comment = await comment_service.create_comment(data, identity.id)
    return envelope(
        message="Comment created successfully",
        data=comment,
        status_code=status.HTTP_201_CREATED,
    )


# ============================================================
# Read Comments
# ============================================================
@router.get("/get-post-comments")
async def list_post_comments(
    post_id: Optional[str] = Query(None, description="ID of the post"),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the comments of a post, newest first.
    """
    current_page = parse_page(page)
    comment_service = CommentService(db)
    comments, total = await comment_service.list_post_comments(post_id, current_page)
    return envelope(
        data=comments,
        pagination=build_pagination(
            current_page, settings.COMMENTS_PAGE_SIZE, total, "totalComments"
        ),
    )


@router.get("/get-single-comments/{comment_id}")
async def get_comment(
    comment_id: int = Path(..., ge=DB_INT_MIN, le=DB_INT_MAX),
    db: AsyncSession = Depends(get_db)
):
    comment_service = CommentService(db)
    comment = await comment_service.get_comment(comment_id)
    return envelope(data=comment)


# ============================================================
# Update / Delete Comment
# ============================================================
@router.post("/update-comments/{comment_id}")
async def update_comment(
    data: CommentUpdate,
    comment_id: int = Path(..., ge=DB_INT_MIN, le=DB_INT_MAX),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Edit a comment. Only its author may do this."""
    comment_service = CommentService(db)
    comment = await comment_service.update_comment(comment_id, data, identity.id)
    return envelope(message="Comment updated successfully", data=comment)


@router.post("/delete-comments/{comment_id}")
async def delete_comment(
    comment_id: int = Path(..., ge=DB_INT_MIN, le=DB_INT_MAX),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Permanently delete a comment. Only its author may do this."""
    comment_service = CommentService(db)
    await comment_service.delete_comment(comment_id, identity.id)
    return envelope(message="Comment deleted successfully")

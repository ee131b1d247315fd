from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from blog_api.schemas.common import DB_INT_MAX, DB_INT_MIN, AuthorSummary


# ============================================================
# Request Schemas (What client sends)
# ============================================================

class CommentCreate(BaseModel):
    comment: str = Field(min_length=1)
    post_id: int = Field(ge=DB_INT_MIN, le=DB_INT_MAX)

    class Config:
        json_schema_extra = {
            "example": {
                "comment": "Nice post!",
                "post_id": 15,
            }
        }


class CommentUpdate(BaseModel):
    comment: str = Field(min_length=1)


# ============================================================
# Response Schemas (What server sends back)
# ============================================================

class CommentResponse(BaseModel):
    id: int
    comment: str
    post_id: int
    author_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CommentDetail(CommentResponse):
    author: Optional[AuthorSummary] = None

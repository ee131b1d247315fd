from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from blog_api.schemas.common import DB_INT_MAX, DB_INT_MIN, AuthorSummary, Uri, blank_to_none


# ============================================================
# Request Schemas (What client sends)
# ============================================================

class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    image_url: Optional[Uri] = None
    category_id: Optional[int] = Field(None, ge=DB_INT_MIN, le=DB_INT_MAX)

    @field_validator("image_url", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        return blank_to_none(v)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Hello",
                "content": "World",
                "image_url": "https://example.com/cover.png",
                "category_id": 1,
            }
        }


class PostUpdate(BaseModel):
    """Schema for updating a post. At least one field must be sent."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    image_url: Optional[Uri] = None
    category_id: Optional[int] = Field(None, ge=DB_INT_MIN, le=DB_INT_MAX)

    @field_validator("image_url", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def require_changes(self):
        if not self.model_fields_set:
            raise ValueError('"value" must have at least 1 key')
        for name in ("title", "content"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'"{name}" must be a string')
        return self


# ============================================================
# Response Schemas (What server sends back)
# ============================================================

class CategorySummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class PostResponse(BaseModel):
    """Schema for post data returned from the API."""

    id: int
    title: str
    content: str
    image_url: Optional[str] = None
    author_id: int
    category_id: Optional[int] = None
    is_active: bool
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PostDetail(PostResponse):
    """Post with its author, used by the read endpoints."""

    author: Optional[AuthorSummary] = None


class CategoryPostDetail(PostDetail):
    category: Optional[CategorySummary] = None


class PostDeleted(BaseModel):
    id: int
    title: str
    deleted_at: datetime = Field(serialization_alias="deletedAt")


class PostRemoved(BaseModel):
    id: int
    title: str

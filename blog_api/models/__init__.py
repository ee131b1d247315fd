from blog_api.models.base import Base
from blog_api.models.user import User, LoginType
from blog_api.models.category import Category
from blog_api.models.post import Post
from blog_api.models.comment import Comment

__all__ = [
    "Base",
    "User",
    "LoginType",
    "Category",
    "Post",
    "Comment",
]

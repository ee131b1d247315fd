from blog_api.repositories.base import BaseRepository
from blog_api.repositories.user_repo import UserRepository
from blog_api.repositories.category_repo import CategoryRepository
from blog_api.repositories.post_repo import PostRepository
from blog_api.repositories.comment_repo import CommentRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "CategoryRepository",
    "PostRepository",
    "CommentRepository",
]

"""
User Repository

Data access layer for User model.
All user-related database operations.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from blog_api.repositories.base import BaseRepository
from blog_api.models import User, LoginType


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    # =================
    # Lookups by unique field
    # =================
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        result = await self.db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        result = await self.db.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone: str) -> Optional[User]:
        """Get a user by phone number."""
        result = await self.db.execute(
            select(User).where(User.phone == phone)
        )
        return result.scalar_one_or_none()

    # =================
    # Login lookups
    # =================
    async def get_normal_by_login(self, login: str) -> Optional[User]:
        """Find a normal-login account whose email or phone matches."""
        result = await self.db.execute(
            select(User)
            .where(
                User.login_type == LoginType.NORMAL,
                or_(User.email == login, User.phone == login),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_social(self, email: str, social_id: str) -> Optional[User]:
        """Find a social-login account by email and provider id."""
        result = await self.db.execute(
            select(User).where(
                User.email == email,
                User.social_id == social_id,
                User.login_type == LoginType.SOCIAL,
            )
        )
        return result.scalar_one_or_none()

    async def get_normal_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by id, only if it logs in with a password."""
        result = await self.db.execute(
            select(User).where(
                User.id == user_id,
                User.login_type == LoginType.NORMAL,
            )
        )
        return result.scalar_one_or_none()

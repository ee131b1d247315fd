import asyncio
import logging
from typing import Awaitable, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from blog_api.models import User, LoginType
from blog_api.repositories.user_repo import UserRepository
from blog_api.schemas.common import url_to_str
from blog_api.schemas.user import (
    UserRegister,
    UserLogin,
    PasswordChange,
    PasswordReset,
    ProfileUpdate,
    UserSummary,
    LoginUser,
    LoginData,
)
from blog_api.core.security import PasswordHasher, TokenService, pwd_hasher, token_service
from blog_api.core.exceptions import (
    AccountNotFoundError,
    AccountNotVerifiedError,
    AlreadyExistsError,
    InactiveAccountError,
    InvalidCredentialsError,
    OperationNotAllowedError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

UserLookup = Callable[[UserRepository], Awaitable[Optional[User]]]


class UserService:
    """
    Service class for the user account lifecycle.

    """
    def __init__(
        self,
        db: AsyncSession,
        tokens: TokenService = token_service,
        hasher: PasswordHasher = pwd_hasher,
    ):
        """
        Initialize with database session.

        Args:
            db: AsyncSession instance
            tokens: Signs the token returned at login
            hasher: Hashes and checks passwords
        """
        self.db = db
        self.user_repo = UserRepository(db)
        self.tokens = tokens
        self.hasher = hasher

    # ============================================================
    # User Registration
    # ============================================================
    async def register(self, user_data: UserRegister) -> UserSummary:
        """
        Register a new user.

        Email, username and phone uniqueness are checked concurrently.

        Raises:
            AlreadyExistsError: If email, username or phone is taken
        """
        email_taken, username_taken, phone_taken = await asyncio.gather(
            self._is_taken(lambda repo: repo.get_by_email(user_data.email)),
            self._is_taken(lambda repo: repo.get_by_username(user_data.username)),
            self._is_taken(lambda repo: repo.get_by_phone(user_data.phone))
            if user_data.phone else self._nothing(),
        )

        if email_taken:
            raise AlreadyExistsError(f"Email {user_data.email} already exists.")
        if username_taken:
            raise AlreadyExistsError(f"Username {user_data.username} already exists.")
        if phone_taken:
            raise AlreadyExistsError(f"Phone {user_data.phone} already exists.")

        is_social = bool(user_data.social_id)
        password = None
        if not is_social:
            password = await run_in_threadpool(self.hasher.hash, user_data.password)

        try:
            user = await self.user_repo.create(
                fullname=user_data.fullname,
                username=user_data.username,
                email=user_data.email,
                password=password,
                country_code=user_data.country_code,
                phone=user_data.phone,
                profile_pic=url_to_str(user_data.profile_pic),
                login_type=LoginType.SOCIAL if is_social else LoginType.NORMAL,
                social_id=user_data.social_id if is_social else None,
                is_verified=True,
                step=1,
            )
        except IntegrityError:
            # Another request registered the same email/username/phone first
            await self.user_repo.rollback()
            raise AlreadyExistsError("User already exists.")

        logger.info(f"User registered: id={user.id} username={user.username}")
        return UserSummary.model_validate(user)

    # ============================================================
    # User Login
    # ============================================================
    async def login(self, login_data: UserLogin) -> LoginData:
        """
        Authenticate a user and return a signed token.

        Unknown accounts and wrong passwords fail with the same error so
        callers cannot tell which one happened.

        Raises:
            InvalidCredentialsError, AccountNotFoundError,
            InactiveAccountError, AccountNotVerifiedError
        """
        if login_data.social_id:
            # The provider already authenticated the user
            user = await self.user_repo.get_social(
                login_data.login_email_phone, login_data.social_id
            )
        else:
            user = await self.user_repo.get_normal_by_login(login_data.login_email_phone)
            if user and not await run_in_threadpool(
                self.hasher.verify, login_data.password, user.password
            ):
                user = None

        if not user:
            logger.warning("Login rejected: invalid credentials")
            raise InvalidCredentialsError()

        if user.is_deleted:
            raise AccountNotFoundError("User account not found")
        if not user.is_active:
            raise InactiveAccountError()
        if not user.is_verified:
            raise AccountNotVerifiedError()

        user.is_login = True
        await self.user_repo.save(user)

        token = self.tokens.issue({
            "id": user.id,
            "email": user.email,
            "username": user.username,
        })

        logger.info(f"User logged in: id={user.id}")
        return LoginData(
            user=LoginUser(id=user.id, email=user.email, username=user.username, token=token)
        )

    # ============================================================
    # User Logout
    # ============================================================
    async def logout(self, user_id: int) -> None:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise AccountNotFoundError("User not found")

        user.is_login = False
        await self.user_repo.save(user)
        logger.info(f"User logged out: id={user_id}")

    # ============================================================
    # Change Password (old password required)
    # ============================================================
    async def change_password(self, user_id: int, data: PasswordChange) -> None:
        """
        Replace the password after checking the old one.

        Only normal-login accounts have a password to change.
        """
        user = await self.user_repo.get_normal_by_id(user_id)
        if not user:
            raise AccountNotFoundError("User not found or not eligible for password change")

        if not await run_in_threadpool(self.hasher.verify, data.old_password, user.password):
            raise InvalidCredentialsError("Old password does not match")

        user.password = await run_in_threadpool(self.hasher.hash, data.new_password)
        await self.user_repo.save(user)
        logger.info(f"Password changed: user id={user_id}")

    # ============================================================
    # Reset Password (active session required)
    # ============================================================
    async def reset_password(self, user_id: int, data: PasswordReset) -> None:
        """
        Set a new password without the old one.

        The account must currently be logged in and use normal login.
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise AccountNotFoundError("User not found")

        if not user.is_login:
            raise UnauthorizedError("You must be logged in to reset password")

        if user.login_type != LoginType.NORMAL:
            raise OperationNotAllowedError("Password reset is not allowed for social login users")

        user.password = await run_in_threadpool(self.hasher.hash, data.new_password)
        await self.user_repo.save(user)
        logger.info(f"Password reset: user id={user_id}")

    # ============================================================
    # Edit Profile
    # ============================================================
    async def edit_profile(self, user_id: int, data: ProfileUpdate) -> UserSummary:
        """
        Update the caller's profile. Fields that are not sent stay as they are.

        Raises:
            AccountNotFoundError, UnauthorizedError, AlreadyExistsError
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise AccountNotFoundError("User not found")

        if not user.is_login:
            raise UnauthorizedError("You must be logged in to edit profile")

        if data.email and data.email != user.email:
            if await self.user_repo.get_by_email(data.email):
                raise AlreadyExistsError(f"Email '{data.email}' already exists.")
            user.email = data.email

        if data.username and data.username != user.username:
            if await self.user_repo.get_by_username(data.username):
                raise AlreadyExistsError(f"Username '{data.username}' already exists.")
            user.username = data.username

        if data.phone and data.phone != user.phone:
            if await self.user_repo.get_by_phone(data.phone):
                raise AlreadyExistsError(f"Phone '{data.phone}' already exists.")
            user.phone = data.phone

        if data.fullname is not None:
            user.fullname = data.fullname
        if data.country_code is not None:
            user.country_code = data.country_code
        if data.profile_pic is not None:
            user.profile_pic = url_to_str(data.profile_pic)

        try:
            await self.user_repo.save(user)
        except IntegrityError:
            await self.user_repo.rollback()
            raise AlreadyExistsError("User already exists.")

        return UserSummary.model_validate(user)

    # ============================================================
    # Helper Methods
    # ============================================================
    async def _is_taken(self, lookup: UserLookup) -> bool:
        # Each concurrent check needs its own session
        async with AsyncSession(bind=self.db.bind, expire_on_commit=False) as session:
            return await lookup(UserRepository(session)) is not None

    @staticmethod
    async def _nothing() -> bool:
        return False

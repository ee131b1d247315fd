import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core.config import settings
from blog_api.core.exceptions import TokenInvalidError, TokenMissingError
from blog_api.core.security import InvalidTokenError, TokenService, token_service
from blog_api.db.database import get_db
from blog_api.schemas.user import TokenIdentity
from blog_api.services.user_service import UserService

logger = logging.getLogger(__name__)


# =====================================================
# Injected secrets
# =====================================================
def get_api_key() -> str:
    """The shared API key every client must send. Read by APIKeyMiddleware."""
    return settings.API_KEY


def get_token_service() -> TokenService:
    return token_service


# =====================================================
# Get Current identity
# =====================================================
async def get_current_identity(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service)
) -> TokenIdentity:
    """
    Validate the token in the ``Authorization`` header.

    The header carries the bare token, without a ``Bearer`` prefix.
    No database lookup happens here.

    Raises:
        TokenMissingError: If the header is absent
        TokenInvalidError: If the token is invalid or expired
    """
    if not authorization:
        raise TokenMissingError()

    try:
        claims = tokens.verify(authorization)
    except InvalidTokenError as e:
        logger.warning(f"Rejected token: {e}")
        raise TokenInvalidError()

    return TokenIdentity(
        id=claims["id"],
        email=claims.get("email"),
        username=claims.get("username"),
    )


# =====================================================
# Services
# =====================================================
def get_user_service(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service)
) -> UserService:
    return UserService(db, tokens=tokens)

import hmac
from datetime import datetime, timezone, timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt

# Use bcrypt directly to avoid passlib/bcrypt version conflicts
import bcrypt

# =====================================================
# Application Settings
# =====================================================
from blog_api.core.config import settings

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def api_key_matches(sent: Optional[str], expected: str) -> bool:
    """Constant-time comparison of the client's API key against the configured one."""
    if not sent:
        return False
    return hmac.compare_digest(sent.encode("utf-8"), expected.encode("utf-8"))


class InvalidTokenError(Exception):
    """Raised when a token has a bad signature, is expired or is malformed."""


# =====================================================
# Password Hashing
# =====================================================
class PasswordHasher:
    """
    Salted, one-way password hashing with bcrypt.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, password: str) -> str:
        """
        Hash a plain-text password using bcrypt.
        """
        if not password:
            raise ValueError("Password cannot be empty")
        return bcrypt.hashpw(
            self._encode(password),
            bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def verify(self, plain_password: Optional[str], hashed_password: Optional[str]) -> bool:
        """
        Verify a plain-text password against a bcrypt hash.

        Mismatches, empty inputs and malformed hashes all return False.
        """
        if not plain_password or not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                self._encode(plain_password),
                hashed_password.encode("utf-8")
            )
        except ValueError:
            return False


# =====================================================
# JWT Tokens
# =====================================================
class TokenService:
    """
    Signs and verifies the bearer tokens handed out at login.

    The signing key is passed in, so rotating it invalidates every
    outstanding token.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(days=7),
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed token carrying the given identity claims.
        """
        # Current UTC time (timezone-aware)
        now = datetime.now(timezone.utc)

        to_encode = dict(claims)
        to_encode.update({
            "iat": now,
            "exp": now + (expires_delta or self.expires_delta),
        })
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        Raises:
            InvalidTokenError: If the token cannot be trusted
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm]
            )
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        if payload.get("id") is None:
            raise InvalidTokenError("Token carries no user id")
        return payload

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Read the claims WITHOUT checking the signature. Never use this for auth.
        """
        try:
            return jwt.get_unverified_claims(token)
        except JWTError:
            return None


# =====================================================
# Default instances
# =====================================================
pwd_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

token_service = TokenService(
    secret_key=settings.JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    expires_delta=timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
)

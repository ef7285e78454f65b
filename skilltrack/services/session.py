from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import uuid4
import secrets

from passlib.context import CryptContext
from jose import JWTError, jwt

from ..errors import UnauthorizedError

ALGORITHM = "HS256"


class PasswordHasher:
    """One-way password hashing backed by passlib."""

    def __init__(self, schemes: Optional[list] = None):
        self._context = CryptContext(schemes=schemes or ["pbkdf2_sha256"], deprecated="auto")

    def hash(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return self._context.verify(plain, hashed)
        except ValueError:
            # Stored value is not a hash this context recognizes
            return False


class TokenProvider:
    """Issues and verifies session tokens.

    Access tokens are HS256 JWTs carrying the user id in ``sub``. Refresh
    tokens are opaque random strings; their validity lives in the user record.
    """

    def __init__(
        self,
        secret: str,
        access_ttl_seconds: int = 900,
        refresh_ttl_seconds: int = 60 * 60 * 24 * 30,
    ):
        self.secret = secret
        self.access_ttl_seconds = access_ttl_seconds
        self.refresh_ttl_seconds = refresh_ttl_seconds

    def sign(self, user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(seconds=self.access_ttl_seconds))
        to_encode = {
            "sub": user_id,
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(to_encode, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict:
        """Decode an access token.

        Raises:
            UnauthorizedError: If the token is malformed, tampered with or expired
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except JWTError:
            raise UnauthorizedError("Invalid or expired access token")
        if not payload.get("sub"):
            raise UnauthorizedError("Invalid or expired access token")
        return payload

    def generate_refresh_token(self) -> Tuple[str, datetime]:
        """Return a fresh refresh token and its expiry (naive local time)."""
        expires_at = datetime.now() + timedelta(seconds=self.refresh_ttl_seconds)
        return secrets.token_urlsafe(48), expires_at

"""Auth use cases: register, login, refresh, me and logout."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..errors import NotFoundError, UnauthorizedError
from ..models import User
from ..repositories import UserRepository
from .session import PasswordHasher, TokenProvider
from .token_store import TokenStore
from .user_domain import UserDomainService

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    access_token: str
    refresh_token: str
    user: User


def _issue_session(
    user: User,
    users: UserRepository,
    tokens: TokenProvider,
    token_store: Optional[TokenStore],
) -> AuthResult:
    """Rotate the user's refresh token, persist it and mint an access token."""
    refresh_token, expires_at = tokens.generate_refresh_token()
    user.refresh_token = refresh_token
    user.refresh_token_expires_at = expires_at
    saved = users.update(user)
    access_token = tokens.sign(saved.id, saved.email)
    if token_store is not None:
        token_store.save_tokens(saved.id, access_token, refresh_token)
    return AuthResult(access_token=access_token, refresh_token=refresh_token, user=saved)


class RegisterUser:
    def __init__(
        self,
        users: UserRepository,
        domain: UserDomainService,
        hasher: PasswordHasher,
        tokens: TokenProvider,
        token_store: Optional[TokenStore] = None,
    ):
        self.users = users
        self.domain = domain
        self.hasher = hasher
        self.tokens = tokens
        self.token_store = token_store

    def execute(self, email: str, password: str) -> AuthResult:
        email = email.strip()
        self.domain.ensure_email_available(self.users.find_by_email(email), email)

        refresh_token, expires_at = self.tokens.generate_refresh_token()
        user = self.users.create(
            User(
                email=email,
                password_hash=self.hasher.hash(password),
                refresh_token=refresh_token,
                refresh_token_expires_at=expires_at,
            )
        )
        access_token = self.tokens.sign(user.id, user.email)
        if self.token_store is not None:
            self.token_store.save_tokens(user.id, access_token, refresh_token)
        logger.info(f"Registered user {user.id}")
        return AuthResult(access_token=access_token, refresh_token=refresh_token, user=user)


class LoginUser:
    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenProvider,
        token_store: Optional[TokenStore] = None,
    ):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.token_store = token_store

    def execute(self, email: str, password: str) -> AuthResult:
        user = self.users.find_by_email(email.strip())
        # Same message for both cases so callers cannot probe for accounts
        if user is None or not self.hasher.verify(password, user.password_hash):
            raise UnauthorizedError("Invalid credentials")
        result = _issue_session(user, self.users, self.tokens, self.token_store)
        logger.info(f"User {user.id} logged in")
        return result


class RefreshSession:
    def __init__(
        self,
        users: UserRepository,
        tokens: TokenProvider,
        token_store: Optional[TokenStore] = None,
    ):
        self.users = users
        self.tokens = tokens
        self.token_store = token_store

    def execute(self, refresh_token: Optional[str]) -> AuthResult:
        user = self.users.find_by_refresh_token(refresh_token) if refresh_token else None
        if (
            user is None
            or user.refresh_token_expires_at is None
            or user.refresh_token_expires_at < datetime.now()
        ):
            raise UnauthorizedError("Invalid refresh token")
        if self.token_store is not None:
            self.token_store.revoke_user_tokens(user.id)
        return _issue_session(user, self.users, self.tokens, self.token_store)


class GetMe:
    def __init__(self, users: UserRepository):
        self.users = users

    def execute(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user


class LogoutUser:
    """Forget the user's refresh token and drop their cached session keys."""

    def __init__(self, users: UserRepository, token_store: Optional[TokenStore] = None):
        self.users = users
        self.token_store = token_store

    def execute(self, user_id: str) -> None:
        user = self.users.find_by_id(user_id)
        if user is not None and user.refresh_token is not None:
            user.refresh_token = None
            user.refresh_token_expires_at = None
            self.users.update(user)
        if self.token_store is not None:
            self.token_store.revoke_user_tokens(user_id)
        logger.info(f"User {user_id} logged out")

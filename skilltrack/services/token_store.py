"""Redis-backed store mapping issued session tokens to user ids."""

import json
import logging
from typing import Dict, Optional

import redis

logger = logging.getLogger(__name__)


class TokenStore:
    """TTL key-value cache of issued tokens.

    Three key families are kept per session:

    - ``access-token:<token>`` -> user id, expires with the access token
    - ``refresh-token:<token>`` -> user id, expires with the refresh token
    - ``user-tokens:<user id>`` -> JSON ``{"accessToken", "refreshToken"}``

    The store owns its Redis client. Use :meth:`connect` at startup and
    :meth:`close` at shutdown.
    """

    def __init__(self, client: "redis.Redis", access_ttl_seconds: int, refresh_ttl_seconds: int):
        self._client = client
        self.access_ttl_seconds = access_ttl_seconds
        self.refresh_ttl_seconds = refresh_ttl_seconds

    @classmethod
    def connect(cls, url: str, access_ttl_seconds: int, refresh_ttl_seconds: int) -> "TokenStore":
        """Open a Redis connection and verify it answers.

        Raises:
            redis.exceptions.ConnectionError: If Redis cannot be reached
        """
        client = redis.Redis.from_url(url, decode_responses=True)
        try:
            client.ping()
        except redis.exceptions.RedisError as e:
            logger.error(f"Token store connection to {url} failed: {e}")
            client.close()
            raise
        logger.info(f"Token store connected: {url}")
        return cls(client, access_ttl_seconds, refresh_ttl_seconds)

    def close(self) -> None:
        self._client.close()

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.exceptions.RedisError as e:
            logger.error(f"Token store ping failed: {e}")
            return False

    def save_tokens(self, user_id: str, access_token: str, refresh_token: str) -> None:
        """Write all three keys for a session in one MULTI/EXEC round trip."""
        pipe = self._client.pipeline(transaction=True)
        pipe.set(self._access_key(access_token), user_id, ex=self.access_ttl_seconds)
        pipe.set(self._refresh_key(refresh_token), user_id, ex=self.refresh_ttl_seconds)
        pipe.set(
            self._user_key(user_id),
            json.dumps({"accessToken": access_token, "refreshToken": refresh_token}),
            ex=self.refresh_ttl_seconds,
        )
        pipe.execute()

    def get_user_id_by_access_token(self, token: str) -> Optional[str]:
        return self._client.get(self._access_key(token))

    def get_user_id_by_refresh_token(self, token: str) -> Optional[str]:
        return self._client.get(self._refresh_key(token))

    def get_tokens_for_user(self, user_id: str) -> Dict[str, Optional[str]]:
        """Return the tokens last saved for a user.

        Both values are None when nothing is stored or the blob is unreadable.
        """
        parsed = self._load_user_blob(user_id)
        return {
            "accessToken": parsed.get("accessToken"),
            "refreshToken": parsed.get("refreshToken"),
        }

    def revoke_user_tokens(self, user_id: str) -> None:
        """Delete the user's session keys.

        A missing or malformed per-user blob only removes the per-user key.
        """
        parsed = self._load_user_blob(user_id)
        keys = [self._user_key(user_id)]
        if parsed.get("accessToken"):
            keys.append(self._access_key(parsed["accessToken"]))
        if parsed.get("refreshToken"):
            keys.append(self._refresh_key(parsed["refreshToken"]))
        self._client.delete(*keys)

    def _load_user_blob(self, user_id: str) -> dict:
        raw = self._client.get(self._user_key(user_id))
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse cached tokens for user {user_id}: {e}")
            return {}
        return parsed if isinstance(parsed, dict) else {}

    @staticmethod
    def _access_key(token: str) -> str:
        return f"access-token:{token}"

    @staticmethod
    def _refresh_key(token: str) -> str:
        return f"refresh-token:{token}"

    @staticmethod
    def _user_key(user_id: str) -> str:
        return f"user-tokens:{user_id}"

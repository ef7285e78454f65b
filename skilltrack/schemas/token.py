from typing import Optional

from .base import CamelModel


class SaveTokensRequest(CamelModel):
    user_id: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class VerifyTokenRequest(CamelModel):
    access_token: Optional[str] = None


class StoredTokens(CamelModel):
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

from typing import Optional

from fastapi import Cookie, Depends, Header, HTTPException, Request, status

from ..container import AuthContainer, TaskContainer
from ..errors import UnauthorizedError

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


def get_auth_container(request: Request) -> AuthContainer:
    return request.app.state.container


def get_task_container(request: Request) -> TaskContainer:
    return request.app.state.container


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_caller_id(
    x_user_id: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
    access_token: Optional[str] = Cookie(None),
    container: TaskContainer = Depends(get_task_container),
) -> str:
    """Resolve the calling user for the task service.

    Order: ``x-user-id`` header, then the bearer token (or access-token
    cookie) looked up in the token store.
    """
    if x_user_id:
        return x_user_id

    token = bearer_token(authorization) or access_token
    if token and container.token_store is not None:
        user_id = container.token_store.get_user_id_by_access_token(token)
        if user_id:
            return user_id
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Missing x-user-id or bearer token",
    )


def get_authenticated_user_id(
    x_user_id: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
    access_token: Optional[str] = Cookie(None),
    container: AuthContainer = Depends(get_auth_container),
) -> str:
    """Resolve the calling user for the auth service.

    Order: ``x-user-id`` header, then a signed access token from the bearer
    header or the access-token cookie.
    """
    if x_user_id:
        return x_user_id

    token = bearer_token(authorization) or access_token
    if not token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing user id header or access token",
        )
    try:
        payload = container.tokens.verify(token)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload["sub"]


def get_optional_user_id(
    authorization: Optional[str] = Header(None),
    access_token: Optional[str] = Cookie(None),
    container: AuthContainer = Depends(get_auth_container),
) -> Optional[str]:
    """Best-effort caller lookup for logout; never rejects."""
    token = bearer_token(authorization) or access_token
    if not token:
        return None
    try:
        return container.tokens.verify(token)["sub"]
    except UnauthorizedError:
        return None

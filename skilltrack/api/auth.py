from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status

from ..config import Settings
from ..container import AuthContainer
from ..dependencies.auth import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_auth_container,
    get_authenticated_user_id,
    get_optional_user_id,
)
from ..schemas.user import AuthResponse, LoginRequest, RefreshRequest, RegisterRequest, UserOut
from ..services.auth import AuthResult

router = APIRouter()


def _set_session_cookies(response: Response, result: AuthResult, settings: Settings) -> None:
    secure = settings.cookie_secure
    response.set_cookie(
        ACCESS_COOKIE,
        result.access_token,
        max_age=settings.access_token_ttl_seconds,
        httponly=True,
        secure=secure,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_COOKIE,
        result.refresh_token,
        max_age=settings.refresh_token_ttl_seconds,
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/auth",
    )


def _auth_response(response: Response, result: AuthResult, container: AuthContainer) -> AuthResponse:
    _set_session_cookies(response, result, container.settings)
    return AuthResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        user=UserOut.model_validate(result.user),
    )


@router.post("/register", response_model=AuthResponse)
def register(
    body: RegisterRequest,
    response: Response,
    container: AuthContainer = Depends(get_auth_container),
):
    result = container.register.execute(body.email, body.password)
    return _auth_response(response, result, container)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    container: AuthContainer = Depends(get_auth_container),
):
    result = container.login.execute(body.email, body.password)
    return _auth_response(response, result, container)


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    response: Response,
    body: Optional[RefreshRequest] = None,
    refresh_token: Optional[str] = Cookie(None),
    container: AuthContainer = Depends(get_auth_container),
):
    """Rotate the session. The token comes from the body or the refresh cookie."""
    token = (body.refresh_token if body else None) or refresh_token
    result = container.refresh.execute(token)
    return _auth_response(response, result, container)


@router.get("/me", response_model=UserOut)
def me(
    user_id: str = Depends(get_authenticated_user_id),
    container: AuthContainer = Depends(get_auth_container),
):
    return container.get_me.execute(user_id)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    user_id: Optional[str] = Depends(get_optional_user_id),
    container: AuthContainer = Depends(get_auth_container),
):
    if user_id:
        container.logout.execute(user_id)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE, path="/auth")
    return response

"""Internal endpoints for reading and writing the token store.

The auth service writes to the same Redis directly; these routes exist for
other callers (and operators) that only talk HTTP to the task service.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..container import TaskContainer
from ..dependencies.auth import get_task_container
from ..schemas.token import SaveTokensRequest, StoredTokens, VerifyTokenRequest
from ..services.token_store import TokenStore

router = APIRouter()


def get_token_store(container: TaskContainer = Depends(get_task_container)) -> TokenStore:
    if container.token_store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token store is not configured",
        )
    return container.token_store


@router.post("", status_code=status.HTTP_201_CREATED)
def save_tokens(body: SaveTokensRequest, store: TokenStore = Depends(get_token_store)):
    if not body.user_id or not body.access_token or not body.refresh_token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="userId, accessToken and refreshToken are required",
        )
    store.save_tokens(body.user_id, body.access_token, body.refresh_token)
    return {"message": "Tokens stored"}


@router.post("/verify")
def verify_access_token(body: VerifyTokenRequest, store: TokenStore = Depends(get_token_store)):
    if not body.access_token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="accessToken is required",
        )
    user_id = store.get_user_id_by_access_token(body.access_token)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired access token",
        )
    return {"userId": user_id}


@router.get("/{user_id}", response_model=StoredTokens)
def get_tokens_for_user(user_id: str, store: TokenStore = Depends(get_token_store)):
    tokens = store.get_tokens_for_user(user_id)
    if not tokens["accessToken"] and not tokens["refreshToken"]:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No tokens found for user",
        )
    return StoredTokens(access_token=tokens["accessToken"], refresh_token=tokens["refreshToken"])


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_tokens(user_id: str, store: TokenStore = Depends(get_token_store)):
    store.revoke_user_tokens(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

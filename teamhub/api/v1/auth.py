"""
Authentication routes.
POST /auth/register, /auth/login, /auth/logout, /auth/tokens
DELETE /auth/tokens/{token_id}
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from teamhub.core.config import settings
from teamhub.core.dependencies import DBSession, InteractiveUser
from teamhub.core.rate_limit import limiter
from teamhub.core.responses import handle_api_success, render
from teamhub.schemas.user import AccountRead, LoginRequest, OAuthTokenCreate, UserCreate
from teamhub.services.auth_service import auth_service
from teamhub.services.response_service import response_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    request: Request,
    user_in: UserCreate,
    db: DBSession,
) -> Response:
    user = await auth_service.register_user(db, user_in=user_in)
    payload = await response_service.api_wrap(db, user, schema=AccountRead)
    return handle_api_success(request, payload, is_new=True)


@router.post(
    "/login",
    summary="Start a session, optionally with a persistent login cookie",
)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: DBSession,
) -> Response:
    user, remember_token = await auth_service.login(request, db, credentials=credentials)
    response = render(request, await response_service.api_wrap(db, user, schema=AccountRead))
    if remember_token is not None:
        response.set_cookie(
            settings.REMEMBER_COOKIE_NAME,
            remember_token,
            max_age=settings.remember_me_seconds,
            httponly=True,
            samesite="lax",
        )
    return response


@router.post(
    "/logout",
    summary="End the session and forget the login cookie",
)
async def logout(
    request: Request,
    current_user: InteractiveUser,
    db: DBSession,
) -> Response:
    await auth_service.logout(request, db, user=current_user)
    response = handle_api_success(request)
    response.delete_cookie(settings.REMEMBER_COOKIE_NAME)
    return response


@router.post(
    "/tokens",
    status_code=status.HTTP_201_CREATED,
    summary="Issue a delegated access token",
)
async def create_token(
    request: Request,
    token_in: OAuthTokenCreate,
    current_user: InteractiveUser,
    db: DBSession,
) -> Response:
    token = await auth_service.issue_token(db, user=current_user, scopes=list(token_in.scope))
    payload = {"type": "OAuthToken", **token.model_dump(mode="json")}
    return handle_api_success(request, payload, is_new=True)


@router.delete(
    "/tokens/{token_id}",
    summary="Revoke a delegated access token",
)
async def revoke_token(
    request: Request,
    token_id: int,
    current_user: InteractiveUser,
    db: DBSession,
) -> Response:
    await auth_service.revoke_token(db, user=current_user, token_id=token_id)
    return handle_api_success(request)

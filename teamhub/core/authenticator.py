"""
Request authentication.

An Authenticator tries its strategies in a fixed order (session, HTTP basic
auth, persistent cookie, delegated bearer token) and the first one that
yields a user wins. A strategy that recognises credentials but rejects them
leaves a reason behind, which becomes the message of the AuthorizationFailed
error when no strategy succeeds.

The outcome is memoised on request.state, a failed resolution included.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from fastapi import HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.config import settings
from teamhub.core.exceptions import AuthorizationFailed
from teamhub.core.security import decode_oauth_token, hash_token, verify_password
from teamhub.crud.user import crud_oauth_token, crud_user
from teamhub.models.user import User

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"

STRATEGY_ORDER: tuple[str, ...] = ("session", "basic", "cookie", "token")

basic_scheme = HTTPBasic(auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthAttempt:
    request: Request
    db: AsyncSession
    failure_message: str | None = None

    def fail(self, message: str) -> None:
        self.failure_message = message


Strategy = Callable[[AuthAttempt], Awaitable[User | None]]


def has_session(request: Request) -> bool:
    return "session" in request.scope


# ── Strategies ────────────────────────────────────────────────────────────────

async def login_from_session(attempt: AuthAttempt) -> User | None:
    request = attempt.request
    if not has_session(request):
        return None
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    user = await crud_user.get(attempt.db, int(user_id))
    if user is None or not user.is_active:
        request.session.pop(SESSION_USER_KEY, None)
        return None
    return user


async def login_from_basic_auth(attempt: AuthAttempt) -> User | None:
    try:
        credentials = await basic_scheme(attempt.request)
    except HTTPException:
        attempt.fail("Invalid basic authentication header")
        return None
    if credentials is None:
        return None
    user = await crud_user.get_by_login(attempt.db, credentials.username)
    if (
        user is None
        or not user.is_active
        or not verify_password(credentials.password, user.hashed_password)
    ):
        attempt.fail("Invalid login or password")
        return None
    return user


async def login_from_cookie(attempt: AuthAttempt) -> User | None:
    request = attempt.request
    raw = request.cookies.get(settings.REMEMBER_COOKIE_NAME)
    if not raw:
        return None
    user = await crud_user.get_by_remember_hash(attempt.db, hash_token(raw))
    if user is None or not user.is_active or not user.remember_token_valid():
        attempt.fail("Login cookie is invalid or has expired")
        return None
    if has_session(request):
        request.session[SESSION_USER_KEY] = user.id
    return user


async def login_from_token(attempt: AuthAttempt) -> User | None:
    request = attempt.request
    raw = request.query_params.get("token")
    if not raw:
        credentials = await bearer_scheme(request)
        raw = credentials.credentials if credentials is not None else None
    if not raw:
        return None

    try:
        payload = decode_oauth_token(raw)
        token_id = int(payload["jti"])
    except (JWTError, KeyError, ValueError):
        attempt.fail("Invalid OAuth Request")
        return None

    token = await crud_oauth_token.get(attempt.db, token_id)
    if (
        token is None
        or not token.is_valid()
        or str(token.user_id) != str(payload.get("sub"))
        or not token.user.is_active
    ):
        attempt.fail("Invalid or expired OAuth token")
        return None

    user = token.user
    user.current_token = token
    return user


STRATEGIES: dict[str, Strategy] = {
    "session": login_from_session,
    "basic": login_from_basic_auth,
    "cookie": login_from_cookie,
    "token": login_from_token,
}


# ── Authenticator ─────────────────────────────────────────────────────────────

class Authenticator:
    """Resolves the acting user with the permitted strategies, in fixed order."""

    def __init__(self, strategies: Iterable[str] = STRATEGY_ORDER) -> None:
        permitted = set(strategies)
        unknown = permitted - set(STRATEGY_ORDER)
        if unknown:
            raise ValueError(f"Unknown authentication strategies: {sorted(unknown)}")
        self.strategies: tuple[str, ...] = tuple(
            name for name in STRATEGY_ORDER if name in permitted
        )

    async def resolve(self, request: Request, db: AsyncSession) -> tuple[User | None, str | None]:
        """Run the strategies; return (user, None) or (None, failure reason)."""
        attempt = AuthAttempt(request=request, db=db)
        for name in self.strategies:
            user = await STRATEGIES[name](attempt)
            if user is not None:
                logger.debug("Authenticated user %s via %s", user.id, name)
                return user, None
        return None, attempt.failure_message

    async def authenticate(self, request: Request, db: AsyncSession) -> User:
        """The current user, or AuthorizationFailed."""
        memo: dict[tuple[str, ...], tuple[User | None, str | None]] = getattr(
            request.state, "auth_results", None
        ) or {}
        if self.strategies not in memo:
            memo[self.strategies] = await self.resolve(request, db)
            request.state.auth_results = memo

        user, reason = memo[self.strategies]
        if user is None:
            raise AuthorizationFailed(reason)
        return user

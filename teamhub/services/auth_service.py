"""
Authentication service.
Handles registration, session login/logout, the persistent login cookie
and delegated-token issuance. Routes only call these methods.
"""
from __future__ import annotations

import logging

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.authenticator import SESSION_USER_KEY, has_session
from teamhub.core.exceptions import AuthorizationFailed, InvalidRecord, ObjectNotFound
from teamhub.core.security import (
    create_oauth_token,
    generate_remember_token,
    hash_password,
    hash_token,
    oauth_token_expiry,
    remember_token_expiry,
    verify_password,
)
from teamhub.crud.user import crud_oauth_token, crud_user
from teamhub.models.oauth_token import OAuthToken
from teamhub.models.user import User
from teamhub.schemas.user import LoginRequest, OAuthTokenRead, UserCreate

logger = logging.getLogger(__name__)


class AuthService:

    async def register_user(
        self, db: AsyncSession, *, user_in: UserCreate
    ) -> User:
        """Create an account after checking email and username are free."""
        errors: dict[str, list[str]] = {}
        if await crud_user.exists(db, email=user_in.email.lower()):
            errors["email"] = ["has already been taken"]
        if await crud_user.exists(db, username=user_in.username):
            errors["username"] = ["has already been taken"]
        if errors:
            raise InvalidRecord(errors)

        user = await crud_user.create_user(
            db,
            email=user_in.email,
            username=user_in.username,
            hashed_password=hash_password(user_in.password),
            first_name=user_in.first_name,
            last_name=user_in.last_name,
        )
        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return user

    async def login(
        self, request: Request, db: AsyncSession, *, credentials: LoginRequest
    ) -> tuple[User, str | None]:
        """
        Start a session for the user.
        Returns the user and, when remember_me was asked for, the raw
        persistent-cookie token (only its hash is stored).
        """
        user = await crud_user.get_by_login(db, credentials.login)
        if (
            user is None
            or not user.is_active
            or not verify_password(credentials.password, user.hashed_password)
        ):
            raise AuthorizationFailed("Invalid login or password")

        if has_session(request):
            request.session[SESSION_USER_KEY] = user.id

        remember_token = None
        if credentials.remember_me:
            remember_token = generate_remember_token()
            user = await crud_user.set_remember_token(
                db,
                user=user,
                token_hash=hash_token(remember_token),
                expires_at=remember_token_expiry(),
            )

        logger.info("User id=%s logged in", user.id)
        return user, remember_token

    async def logout(self, request: Request, db: AsyncSession, *, user: User) -> None:
        """End the session and forget the persistent cookie."""
        if has_session(request):
            request.session.clear()
        await crud_user.set_remember_token(db, user=user, token_hash=None, expires_at=None)
        logger.info("User id=%s logged out", user.id)

    async def issue_token(
        self, db: AsyncSession, *, user: User, scopes: list[str]
    ) -> OAuthTokenRead:
        scopes = list(dict.fromkeys(scopes))
        token = await crud_oauth_token.create_token(
            db, user_id=user.id, scopes=scopes, expires_at=oauth_token_expiry()
        )
        access_token = create_oauth_token(user.id, token.id, scopes, token.expires_at)
        logger.info("Issued token id=%s for user id=%s scope=%s", token.id, user.id, token.scope)
        return OAuthTokenRead(
            id=token.id,
            access_token=access_token,
            scope=token.scopes,
            expires_at=token.expires_at,
        )

    async def revoke_token(self, db: AsyncSession, *, user: User, token_id: int) -> OAuthToken:
        token = await crud_oauth_token.get(db, token_id)
        if token is None or token.user_id != user.id:
            raise ObjectNotFound("Token not found")
        return await crud_oauth_token.invalidate(db, token=token)


auth_service = AuthService()

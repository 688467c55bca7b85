"""
User and OAuthToken CRUD operations.
"""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from teamhub.crud.base import CRUDBase
from teamhub.models.oauth_token import OAuthToken
from teamhub.models.user import User


class CRUDUser(CRUDBase[User]):

    async def get_by_login(self, db: AsyncSession, login: str) -> User | None:
        """Look a user up by username or email."""
        result = await db.execute(
            select(User).where(or_(User.username == login, User.email == login.lower()))
        )
        return result.scalars().first()

    async def get_by_remember_hash(self, db: AsyncSession, token_hash: str) -> User | None:
        result = await db.execute(select(User).where(User.remember_token_hash == token_hash))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        db: AsyncSession,
        *,
        email: str,
        username: str,
        hashed_password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        return await self.create_from_dict(
            db,
            obj_in={
                "email": email.lower(),
                "username": username,
                "hashed_password": hashed_password,
                "first_name": first_name,
                "last_name": last_name,
            },
        )

    async def set_remember_token(
        self,
        db: AsyncSession,
        *,
        user: User,
        token_hash: str | None,
        expires_at: datetime | None,
    ) -> User:
        return await self.update(
            db,
            db_obj=user,
            obj_in={"remember_token_hash": token_hash, "remember_token_expires_at": expires_at},
        )


class CRUDOAuthToken(CRUDBase[OAuthToken]):
    load_options = (selectinload(OAuthToken.user),)

    async def create_token(
        self, db: AsyncSession, *, user_id: int, scopes: list[str], expires_at: datetime
    ) -> OAuthToken:
        return await self.create_from_dict(
            db,
            obj_in={"user_id": user_id, "scope": " ".join(scopes), "expires_at": expires_at},
        )

    async def invalidate(self, db: AsyncSession, *, token: OAuthToken) -> OAuthToken:
        return await self.update(
            db, db_obj=token, obj_in={"invalidated_at": datetime.now(timezone.utc)}
        )


crud_user = CRUDUser(User)
crud_oauth_token = CRUDOAuthToken(OAuthToken)

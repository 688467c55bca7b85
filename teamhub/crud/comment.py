"""
Conversation and Comment CRUD operations.
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from teamhub.crud.base import CRUDBase
from teamhub.models.comment import Comment
from teamhub.models.conversation import Conversation
from teamhub.schemas.pagination import ListParams


class CRUDConversation(CRUDBase[Conversation]):
    load_options = (selectinload(Conversation.comments), selectinload(Conversation.watchers))

    async def list_in_projects(
        self, db: AsyncSession, *, project_ids: list[int], params: ListParams
    ) -> list[Conversation]:
        return await self.list_page(
            db, Conversation.project_id.in_(project_ids), params=params
        )


class CRUDComment(CRUDBase[Comment]):

    async def list_for_target(
        self,
        db: AsyncSession,
        *,
        target_type: str,
        target_id: int,
        params: ListParams,
    ) -> list[Comment]:
        return await self.list_page(
            db,
            Comment.target_type == target_type,
            Comment.target_id == target_id,
            params=params,
        )

    async def create_comment(
        self,
        db: AsyncSession,
        *,
        body: str,
        project_id: int,
        user_id: int,
        target_type: str,
        target_id: int,
    ) -> Comment:
        return await self.create_from_dict(
            db,
            obj_in={
                "body": body,
                "project_id": project_id,
                "user_id": user_id,
                "target_type": target_type,
                "target_id": target_id,
            },
        )


crud_conversation = CRUDConversation(Conversation)
crud_comment = CRUDComment(Comment)

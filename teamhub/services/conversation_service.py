"""
Conversation and comment service.
Comments hang off a task or a conversation; posting needs the commenter
role, deleting needs authorship or project admin.
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.exceptions import InsufficientPermissions, ObjectNotFound
from teamhub.crud.comment import crud_comment, crud_conversation
from teamhub.crud.project import crud_project
from teamhub.crud.task import crud_watcher
from teamhub.models.comment import Comment
from teamhub.models.conversation import Conversation
from teamhub.models.project import Project
from teamhub.models.task import Task
from teamhub.models.user import User
from teamhub.schemas.comment import CommentCreate, ConversationCreate

logger = logging.getLogger(__name__)

Thread = Task | Conversation


class ConversationService:

    async def create_conversation(
        self,
        db: AsyncSession,
        *,
        project: Project,
        conversation_in: ConversationCreate,
        current_user: User,
    ) -> Conversation:
        """
        Start a conversation whose first comment is the given body.
        A conversation without a name is a simple one.
        """
        self._assert_commentable(project, current_user)
        conversation = await crud_conversation.create_from_dict(
            db,
            obj_in={
                "name": conversation_in.name,
                "simple": not conversation_in.name,
                "project_id": project.id,
                "user_id": current_user.id,
            },
        )
        await crud_comment.create_comment(
            db,
            body=conversation_in.body,
            project_id=project.id,
            user_id=current_user.id,
            target_type="Conversation",
            target_id=conversation.id,
        )
        await crud_watcher.watch(
            db,
            user_id=current_user.id,
            watchable_type="Conversation",
            watchable_id=conversation.id,
        )
        logger.info(
            "User id=%s started conversation id=%s", current_user.id, conversation.id
        )
        return await crud_conversation.get(db, conversation.id)  # type: ignore[return-value]

    async def get_visible_conversation(
        self, db: AsyncSession, *, conversation_id: int, current_user: User
    ) -> Conversation:
        project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
        conversation = await crud_conversation.get_by_id(
            db,
            conversation_id,
            Conversation.project_id.in_(project_ids),
        )
        if conversation is None:
            raise ObjectNotFound("Conversation not found")
        return conversation

    async def get_visible_comment(
        self, db: AsyncSession, *, comment_id: int, current_user: User
    ) -> Comment:
        project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
        comment = await crud_comment.get_by_id(
            db, comment_id, Comment.project_id.in_(project_ids)
        )
        if comment is None:
            raise ObjectNotFound("Comment not found")
        return comment

    async def add_comment(
        self,
        db: AsyncSession,
        *,
        target: Thread,
        comment_in: CommentCreate,
        current_user: User,
    ) -> Comment:
        """Post a comment on a task or conversation; the author starts watching it."""
        project = await crud_project.get(db, target.project_id)
        self._assert_commentable(project, current_user)
        target_type = type(target).__name__
        comment = await crud_comment.create_comment(
            db,
            body=comment_in.body,
            project_id=target.project_id,
            user_id=current_user.id,
            target_type=target_type,
            target_id=target.id,
        )
        await crud_watcher.watch(
            db, user_id=current_user.id, watchable_type=target_type, watchable_id=target.id
        )
        return comment

    async def delete_comment(
        self, db: AsyncSession, *, comment_id: int, current_user: User
    ) -> None:
        comment = await self.get_visible_comment(
            db, comment_id=comment_id, current_user=current_user
        )
        if comment.user_id != current_user.id:
            project = await crud_project.get(db, comment.project_id)
            if project is None or not project.admin(current_user):
                raise InsufficientPermissions("You are not allowed to do that!")
        await crud_comment.remove(db, db_obj=comment)
        logger.info("User id=%s deleted comment id=%s", current_user.id, comment_id)

    # ── Private helpers ───────────────────────────────────────────────────────

    def _assert_commentable(self, project: Project | None, user: User) -> None:
        if project is None or not project.commentable(user):
            raise InsufficientPermissions("You are not allowed to do that!")


conversation_service = ConversationService()

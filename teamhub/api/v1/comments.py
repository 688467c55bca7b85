"""
Comment routes.
Comments are listed and posted on a task or a conversation, and shown or
deleted by id.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.dependencies import CurrentUser, DBSession, ListQuery, WriteUser
from teamhub.core.responses import api_respond, handle_api_success
from teamhub.crud.comment import crud_comment
from teamhub.models.user import User
from teamhub.schemas.comment import CommentCreate
from teamhub.schemas.pagination import ListParams
from teamhub.services.conversation_service import Thread, conversation_service
from teamhub.services.response_service import response_service
from teamhub.services.task_service import task_service

router = APIRouter(tags=["Comments"])


async def _list_comments(
    request: Request, db: AsyncSession, thread: Thread, params: ListParams
) -> Response:
    comments = await crud_comment.list_for_target(
        db, target_type=type(thread).__name__, target_id=thread.id, params=params
    )
    return api_respond(request, await response_service.api_wrap(db, comments, references=True))


async def _post_comment(
    request: Request,
    db: AsyncSession,
    thread: Thread,
    comment_in: CommentCreate,
    current_user: User,
) -> Response:
    comment = await conversation_service.add_comment(
        db, target=thread, comment_in=comment_in, current_user=current_user
    )
    payload = await response_service.api_wrap(db, comment, references=True)
    return handle_api_success(request, payload, is_new=True)


@router.get("/tasks/{task_id}/comments", summary="List a task's comments")
async def list_task_comments(
    request: Request,
    task_id: int,
    current_user: CurrentUser,
    db: DBSession,
    params: ListQuery,
) -> Response:
    task = await task_service.get_visible_task(db, task_id=task_id, current_user=current_user)
    return await _list_comments(request, db, task, params)


@router.post(
    "/tasks/{task_id}/comments",
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a task (commenters and above)",
)
async def create_task_comment(
    request: Request,
    task_id: int,
    comment_in: CommentCreate,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    task = await task_service.get_visible_task(db, task_id=task_id, current_user=current_user)
    return await _post_comment(request, db, task, comment_in, current_user)


@router.get("/conversations/{conversation_id}/comments", summary="List a conversation's comments")
async def list_conversation_comments(
    request: Request,
    conversation_id: int,
    current_user: CurrentUser,
    db: DBSession,
    params: ListQuery,
) -> Response:
    conversation = await conversation_service.get_visible_conversation(
        db, conversation_id=conversation_id, current_user=current_user
    )
    return await _list_comments(request, db, conversation, params)


@router.post(
    "/conversations/{conversation_id}/comments",
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a conversation (commenters and above)",
)
async def create_conversation_comment(
    request: Request,
    conversation_id: int,
    comment_in: CommentCreate,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    conversation = await conversation_service.get_visible_conversation(
        db, conversation_id=conversation_id, current_user=current_user
    )
    return await _post_comment(request, db, conversation, comment_in, current_user)


@router.get("/comments/{comment_id}", summary="Get a comment")
async def show_comment(
    request: Request,
    comment_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    comment = await conversation_service.get_visible_comment(
        db, comment_id=comment_id, current_user=current_user
    )
    return api_respond(request, await response_service.api_wrap(db, comment, references=True))


@router.delete("/comments/{comment_id}", summary="Delete a comment (author or project admin)")
async def delete_comment(
    request: Request,
    comment_id: int,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    await conversation_service.delete_comment(db, comment_id=comment_id, current_user=current_user)
    return handle_api_success(request)

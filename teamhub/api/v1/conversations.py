"""
Conversation routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from teamhub.core.dependencies import CurrentUser, DBSession, ListQuery, MemberProject, WriteUser
from teamhub.core.responses import api_respond, handle_api_success
from teamhub.crud.comment import crud_conversation
from teamhub.schemas.comment import ConversationCreate
from teamhub.services.conversation_service import conversation_service
from teamhub.services.response_service import response_service

router = APIRouter(tags=["Conversations"])


@router.get("/projects/{project_id}/conversations", summary="List a project's conversations")
async def list_conversations(
    request: Request,
    project: MemberProject,
    db: DBSession,
    params: ListQuery,
) -> Response:
    conversations = await crud_conversation.list_in_projects(
        db, project_ids=[project.id], params=params
    )
    return api_respond(
        request, await response_service.api_wrap(db, conversations, references=True)
    )


@router.post(
    "/projects/{project_id}/conversations",
    status_code=status.HTTP_201_CREATED,
    summary="Start a conversation (commenters and above)",
)
async def create_conversation(
    request: Request,
    conversation_in: ConversationCreate,
    project: MemberProject,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    conversation = await conversation_service.create_conversation(
        db, project=project, conversation_in=conversation_in, current_user=current_user
    )
    payload = await response_service.api_wrap(db, conversation, references=True)
    return handle_api_success(request, payload, is_new=True)


@router.get("/conversations/{conversation_id}", summary="Get a conversation with its thread")
async def show_conversation(
    request: Request,
    conversation_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    conversation = await conversation_service.get_visible_conversation(
        db, conversation_id=conversation_id, current_user=current_user
    )
    return api_respond(
        request, await response_service.api_wrap(db, conversation, references=True)
    )

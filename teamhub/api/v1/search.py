"""
Search route.
Matches task and conversation names in the user's projects. References are
the projects and authors of the hits, pulled straight off the records.
"""
from __future__ import annotations

from fastapi import APIRouter, Query, Request, Response
from sqlalchemy.orm import selectinload

from teamhub.core.dependencies import CurrentUser, DBSession, ListQuery
from teamhub.core.responses import api_respond
from teamhub.crud.comment import crud_conversation
from teamhub.crud.project import crud_project
from teamhub.crud.task import crud_task
from teamhub.models.conversation import Conversation
from teamhub.models.task import Task
from teamhub.services.response_service import response_service

router = APIRouter(tags=["Search"])

SEARCH_REFERENCES = ("project", "user")


@router.get("/search", summary="Search tasks and conversations by name")
async def search(
    request: Request,
    current_user: CurrentUser,
    db: DBSession,
    params: ListQuery,
    q: str = Query(min_length=1, max_length=200),
) -> Response:
    project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
    tasks = await crud_task.search_by_name(
        db,
        Task.project_id.in_(project_ids),
        query=q,
        params=params,
        extra_options=(selectinload(Task.project), selectinload(Task.user)),
    )
    conversations = await crud_conversation.search_by_name(
        db,
        Conversation.project_id.in_(project_ids),
        query=q,
        params=params,
        extra_options=(selectinload(Conversation.project), selectinload(Conversation.user)),
    )
    results = [*tasks, *conversations]
    return api_respond(
        request,
        await response_service.api_wrap(db, results, references=list(SEARCH_REFERENCES)),
    )

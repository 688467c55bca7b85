"""
Task list routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from teamhub.core.dependencies import (
    ArchivedFilter,
    CurrentTaskList,
    CurrentUser,
    DBSession,
    ListQuery,
    MemberProject,
    WriteUser,
)
from teamhub.core.responses import api_respond, handle_api_success
from teamhub.crud.project import crud_project
from teamhub.crud.task import crud_task_list
from teamhub.schemas.task import TaskListCreate
from teamhub.services.response_service import response_service
from teamhub.services.task_service import task_service

router = APIRouter(tags=["Task lists"])


@router.get("/task_lists", summary="List task lists across the user's projects")
async def list_all_task_lists(
    request: Request,
    current_user: CurrentUser,
    db: DBSession,
    params: ListQuery,
    archived: ArchivedFilter,
) -> Response:
    project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
    task_lists = await crud_task_list.list_in_projects(
        db, project_ids=project_ids, params=params, archived=archived
    )
    return api_respond(
        request, await response_service.api_wrap(db, task_lists, references=True)
    )


@router.get("/projects/{project_id}/task_lists", summary="List a project's task lists")
async def list_task_lists(
    request: Request,
    project: MemberProject,
    db: DBSession,
    params: ListQuery,
    archived: ArchivedFilter,
) -> Response:
    task_lists = await crud_task_list.list_in_projects(
        db, project_ids=[project.id], params=params, archived=archived
    )
    return api_respond(
        request, await response_service.api_wrap(db, task_lists, references=True)
    )


@router.get(
    "/projects/{project_id}/task_lists/{task_list_id}",
    summary="Get a task list",
)
async def show_task_list(
    request: Request,
    task_list: CurrentTaskList,
    db: DBSession,
) -> Response:
    return api_respond(
        request, await response_service.api_wrap(db, task_list, references=True)
    )


@router.post(
    "/projects/{project_id}/task_lists",
    status_code=status.HTTP_201_CREATED,
    summary="Create a task list (participants and above)",
)
async def create_task_list(
    request: Request,
    task_list_in: TaskListCreate,
    project: MemberProject,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    task_list = await task_service.create_task_list(
        db, project=project, task_list_in=task_list_in, current_user=current_user
    )
    payload = await response_service.api_wrap(db, task_list, references=True)
    return handle_api_success(request, payload, is_new=True)

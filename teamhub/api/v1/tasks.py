"""
Task routes.
Listing across projects, in a project or in a task list; creation inside a
task list; show, update and watch by id.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from teamhub.core.dependencies import (
    CurrentTaskList,
    CurrentUser,
    DBSession,
    ListQuery,
    MemberProject,
    OptionalTaskList,
    WriteUser,
)
from teamhub.core.responses import api_respond, handle_api_success
from teamhub.crud.project import crud_project
from teamhub.crud.task import crud_task
from teamhub.schemas.task import TaskCreate, TaskUpdate
from teamhub.services.response_service import response_service
from teamhub.services.task_service import task_service

router = APIRouter(tags=["Tasks"])


@router.get("/tasks", summary="List tasks across the user's projects")
async def list_all_tasks(
    request: Request,
    current_user: CurrentUser,
    task_list: OptionalTaskList,
    db: DBSession,
    params: ListQuery,
) -> Response:
    project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
    tasks = await crud_task.list_in_projects(
        db,
        project_ids=project_ids,
        params=params,
        task_list_id=task_list.id if task_list is not None else None,
    )
    return api_respond(request, await response_service.api_wrap(db, tasks, references=True))


@router.get("/projects/{project_id}/tasks", summary="List a project's tasks")
async def list_project_tasks(
    request: Request,
    project: MemberProject,
    db: DBSession,
    params: ListQuery,
) -> Response:
    tasks = await crud_task.list_in_projects(db, project_ids=[project.id], params=params)
    return api_respond(request, await response_service.api_wrap(db, tasks, references=True))


@router.get(
    "/projects/{project_id}/task_lists/{task_list_id}/tasks",
    summary="List the tasks of a task list",
)
async def list_task_list_tasks(
    request: Request,
    project: MemberProject,
    task_list: CurrentTaskList,
    db: DBSession,
    params: ListQuery,
) -> Response:
    tasks = await crud_task.list_in_projects(
        db, project_ids=[project.id], params=params, task_list_id=task_list.id
    )
    return api_respond(request, await response_service.api_wrap(db, tasks, references=True))


@router.post(
    "/projects/{project_id}/task_lists/{task_list_id}/tasks",
    status_code=status.HTTP_201_CREATED,
    summary="Create a task (participants and above)",
)
async def create_task(
    request: Request,
    task_in: TaskCreate,
    project: MemberProject,
    task_list: CurrentTaskList,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    task = await task_service.create_task(
        db,
        project=project,
        task_list=task_list,
        task_in=task_in,
        current_user=current_user,
    )
    payload = await response_service.api_wrap(db, task, references=True)
    return handle_api_success(request, payload, is_new=True)


@router.get("/tasks/{task_id}", summary="Get a task with its thread")
async def show_task(
    request: Request,
    task_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    task = await task_service.get_visible_task(db, task_id=task_id, current_user=current_user)
    return api_respond(request, await response_service.api_wrap(db, task, references=True))


@router.put("/tasks/{task_id}", summary="Update a task (participants and above)")
async def update_task(
    request: Request,
    task_id: int,
    task_in: TaskUpdate,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    await task_service.update_task(
        db, task_id=task_id, task_in=task_in, current_user=current_user
    )
    return handle_api_success(request)


@router.post("/tasks/{task_id}/watch", summary="Watch a task")
async def watch_task(
    request: Request,
    task_id: int,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    await task_service.watch(db, task_id=task_id, current_user=current_user)
    return handle_api_success(request)


@router.post("/tasks/{task_id}/unwatch", summary="Stop watching a task")
async def unwatch_task(
    request: Request,
    task_id: int,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    await task_service.unwatch(db, task_id=task_id, current_user=current_user)
    return handle_api_success(request)

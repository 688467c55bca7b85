"""
Project routes.
Listing and creation for the current user; show, update (admin) and
delete (owner) on a project the user belongs to.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from teamhub.core.dependencies import (
    ArchivedFilter,
    CurrentUser,
    DBSession,
    ListQuery,
    MemberProject,
    WriteUser,
)
from teamhub.core.responses import api_respond, handle_api_success
from teamhub.crud.project import crud_project
from teamhub.schemas.project import ProjectCreate, ProjectUpdate
from teamhub.services.project_service import project_service
from teamhub.services.response_service import response_service

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", summary="List the user's projects")
async def list_projects(
    request: Request,
    current_user: CurrentUser,
    db: DBSession,
    params: ListQuery,
    archived: ArchivedFilter,
) -> Response:
    projects = await crud_project.list_for_user(
        db, user_id=current_user.id, params=params, archived=archived
    )
    return api_respond(
        request, await response_service.api_wrap(db, projects, references=True)
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
)
async def create_project(
    request: Request,
    project_in: ProjectCreate,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    project = await project_service.create_project(
        db, project_in=project_in, current_user=current_user
    )
    payload = await response_service.api_wrap(db, project, references=True)
    return handle_api_success(request, payload, is_new=True)


@router.get("/{project_id}", summary="Get a project")
async def show_project(
    request: Request,
    project: MemberProject,
    db: DBSession,
) -> Response:
    return api_respond(request, await response_service.api_wrap(db, project, references=True))


@router.put("/{project_id}", summary="Update a project (admins only)")
async def update_project(
    request: Request,
    project_in: ProjectUpdate,
    project: MemberProject,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    await project_service.update_project(
        db, project=project, project_in=project_in, current_user=current_user
    )
    return handle_api_success(request)


@router.delete("/{project_id}", summary="Delete a project (owner only)")
async def delete_project(
    request: Request,
    project: MemberProject,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    await project_service.delete_project(db, project=project, current_user=current_user)
    return handle_api_success(request)

"""
Organization routes.
Users see the organizations that own at least one of their projects.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response

from teamhub.core.dependencies import (
    ArchivedFilter,
    CurrentOrganization,
    CurrentUser,
    DBSession,
    ListQuery,
)
from teamhub.core.responses import api_respond
from teamhub.crud.project import crud_organization, crud_project
from teamhub.services.response_service import response_service

router = APIRouter(prefix="/organizations", tags=["Organizations"])


@router.get("", summary="List the user's organizations")
async def list_organizations(
    request: Request,
    current_user: CurrentUser,
    db: DBSession,
    params: ListQuery,
) -> Response:
    organizations = await crud_organization.list_for_user(
        db, user_id=current_user.id, params=params
    )
    return api_respond(request, await response_service.api_wrap(db, organizations))


@router.get("/{organization_id}", summary="Get an organization")
async def show_organization(
    request: Request,
    organization: CurrentOrganization,
    db: DBSession,
) -> Response:
    return api_respond(
        request, await response_service.api_wrap(db, organization, references=True)
    )


@router.get("/{organization_id}/projects", summary="List the user's projects in an organization")
async def list_organization_projects(
    request: Request,
    organization: CurrentOrganization,
    current_user: CurrentUser,
    db: DBSession,
    params: ListQuery,
    archived: ArchivedFilter,
) -> Response:
    projects = await crud_project.list_for_user(
        db,
        user_id=current_user.id,
        params=params,
        organization_id=organization.id,
        archived=archived,
    )
    return api_respond(
        request, await response_service.api_wrap(db, projects, references=True)
    )

"""
FastAPI dependency injection functions.
Provides the current user, the scope loaders (project, organization,
task list, page) and the project membership guard.

Scope loaders read their ids from the path or, failing that, the query
string. Every guard raises immediately, so nothing after a failed guard runs.
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.authenticator import STRATEGY_ORDER, Authenticator
from teamhub.core.exceptions import InsufficientPermissions, ObjectNotFound
from teamhub.crud.page import crud_page
from teamhub.crud.project import crud_organization, crud_person, crud_project
from teamhub.crud.task import crud_task_list
from teamhub.db.base import MAX_ID
from teamhub.db.session import get_db
from teamhub.models.organization import Organization
from teamhub.models.page import Page
from teamhub.models.project import Project
from teamhub.models.task_list import TaskList
from teamhub.models.user import User
from teamhub.schemas.pagination import ListParams, api_truth

# Re-export get_db so routes can import from one place
__all__ = [
    "get_db",
    "get_current_user",
    "get_interactive_user",
    "DBSession",
    "CurrentUser",
    "InteractiveUser",
    "WriteUser",
    "MemberProject",
    "CurrentOrganization",
    "OptionalTaskList",
    "CurrentTaskList",
    "CurrentPage",
    "ListQuery",
    "ArchivedFilter",
]

NOT_ALLOWED = "You are not allowed to do that!"

authenticator = Authenticator(STRATEGY_ORDER)
interactive_authenticator = Authenticator(("session", "basic", "cookie"))


def _param(request: Request, name: str) -> str | None:
    return request.path_params.get(name) or request.query_params.get(name)


# ── Users ─────────────────────────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    return await authenticator.authenticate(request, db)


async def get_interactive_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """A user authenticated by anything but a delegated token."""
    return await interactive_authenticator.authenticate(request, db)


async def require_write_grant(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    if not current_user.has_grant("write"):
        raise InsufficientPermissions("This token does not grant write access")
    return current_user


# ── Scope loaders ─────────────────────────────────────────────────────────────

async def load_project(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Project | None:
    project_id = _param(request, "project_id")
    if project_id is None:
        return None
    project = await crud_project.get_by_id_or_permalink(db, project_id)
    if project is None:
        raise ObjectNotFound("Project not found")
    return project


async def load_organization(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Organization | None:
    organization_id = _param(request, "organization_id")
    if organization_id is None:
        return None
    organization = await crud_organization.get_by_id_or_permalink(db, organization_id)
    if organization is None:
        raise ObjectNotFound("Organization not found")
    return organization


async def belongs_to_project(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    project: Annotated[Project | None, Depends(load_project)],
) -> Project | None:
    if project is not None and not await crud_person.is_member(
        db, project_id=project.id, user_id=current_user.id
    ):
        raise InsufficientPermissions(NOT_ALLOWED)
    return project


async def require_project(
    project: Annotated[Project | None, Depends(belongs_to_project)],
) -> Project:
    if project is None:
        raise ObjectNotFound("Project not found")
    return project


async def require_organization(
    current_user: Annotated[User, Depends(get_current_user)],
    organization: Annotated[Organization | None, Depends(load_organization)],
) -> Organization:
    if organization is None:
        raise ObjectNotFound("Organization not found")
    return organization


async def load_task_list(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    project: Annotated[Project | None, Depends(belongs_to_project)],
) -> TaskList | None:
    task_list_id = _param(request, "task_list_id")
    if task_list_id is None:
        return None
    if project is not None:
        scope = TaskList.project_id == project.id
    else:
        project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
        scope = TaskList.project_id.in_(project_ids)
    task_list = await crud_task_list.get_by_id_or_permalink(db, task_list_id, scope)
    if task_list is None:
        raise ObjectNotFound("TaskList not found")
    return task_list


async def require_task_list(
    task_list: Annotated[TaskList | None, Depends(load_task_list)],
) -> TaskList:
    if task_list is None:
        raise ObjectNotFound("TaskList not found")
    return task_list


async def load_page(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    project: Annotated[Project | None, Depends(belongs_to_project)],
) -> Page | None:
    page_id = _param(request, "page_id")
    if page_id is None:
        return None
    if project is not None:
        scope = Page.project_id == project.id
    else:
        project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
        scope = Page.project_id.in_(project_ids)
    page = await crud_page.get_by_id_or_permalink(db, page_id, scope)
    if page is None:
        raise ObjectNotFound("Page not found")
    return page


async def require_page(
    page: Annotated[Page | None, Depends(load_page)],
) -> Page:
    if page is None:
        raise ObjectNotFound("Page not found")
    return page


# ── List parameters ───────────────────────────────────────────────────────────

def list_params(
    count: int | None = None,
    since_id: Annotated[int | None, Query(ge=0, le=MAX_ID)] = None,
    max_id: Annotated[int | None, Query(ge=0, le=MAX_ID)] = None,
) -> ListParams:
    return ListParams(count=count, since_id=since_id, max_id=max_id)


def archived_filter(archived: str | None = None) -> bool | None:
    """No parameter lists everything; otherwise archived or live records only."""
    if archived is None:
        return None
    return api_truth(archived)


# Convenience type aliases for route signatures
DBSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
InteractiveUser = Annotated[User, Depends(get_interactive_user)]
WriteUser = Annotated[User, Depends(require_write_grant)]
MemberProject = Annotated[Project, Depends(require_project)]
CurrentOrganization = Annotated[Organization, Depends(require_organization)]
OptionalTaskList = Annotated[TaskList | None, Depends(load_task_list)]
CurrentTaskList = Annotated[TaskList, Depends(require_task_list)]
CurrentPage = Annotated[Page, Depends(require_page)]
ListQuery = Annotated[ListParams, Depends(list_params)]
ArchivedFilter = Annotated[bool | None, Depends(archived_filter)]

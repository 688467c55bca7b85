"""
Project membership routes.
Anyone in the project may list its people; changing them needs admin.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from teamhub.core.dependencies import DBSession, ListQuery, MemberProject, WriteUser
from teamhub.core.responses import api_respond, handle_api_success
from teamhub.crud.project import crud_person
from teamhub.models.project import Person
from teamhub.schemas.project import PersonCreate, PersonUpdate
from teamhub.services.project_service import project_service
from teamhub.services.response_service import response_service

router = APIRouter(prefix="/projects/{project_id}/people", tags=["People"])


@router.get("", summary="List the people of a project")
async def list_people(
    request: Request,
    project: MemberProject,
    db: DBSession,
    params: ListQuery,
) -> Response:
    people = await crud_person.list_page(db, Person.project_id == project.id, params=params)
    return api_respond(request, await response_service.api_wrap(db, people, references=True))


@router.get("/{person_id}", summary="Get a membership")
async def show_person(
    request: Request,
    person_id: int,
    project: MemberProject,
    db: DBSession,
) -> Response:
    person = await project_service.get_person(db, project=project, person_id=person_id)
    return api_respond(request, await response_service.api_wrap(db, person, references=True))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Add a user to the project (admins only)",
)
async def add_person(
    request: Request,
    person_in: PersonCreate,
    project: MemberProject,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    person = await project_service.add_person(
        db, project=project, person_in=person_in, current_user=current_user
    )
    payload = await response_service.api_wrap(db, person, references=True)
    return handle_api_success(request, payload, is_new=True)


@router.put("/{person_id}", summary="Change a member's role (admins only)")
async def update_person(
    request: Request,
    person_id: int,
    person_in: PersonUpdate,
    project: MemberProject,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    await project_service.update_person(
        db,
        project=project,
        person_id=person_id,
        person_in=person_in,
        current_user=current_user,
    )
    return handle_api_success(request)


@router.delete("/{person_id}", summary="Remove a member (admins, or the member themselves)")
async def remove_person(
    request: Request,
    person_id: int,
    project: MemberProject,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    await project_service.remove_person(
        db, project=project, person_id=person_id, current_user=current_user
    )
    return handle_api_success(request)

"""
Project management service.
Handles project creation and updates and the project's people (memberships
and their roles).
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.exceptions import InsufficientPermissions, InvalidRecord, ObjectNotFound
from teamhub.crud.project import crud_organization, crud_person, crud_project
from teamhub.crud.user import crud_user
from teamhub.models.project import Person, PersonRole, Project
from teamhub.models.user import User
from teamhub.schemas.project import PersonCreate, PersonUpdate, ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


class ProjectService:

    async def create_project(
        self,
        db: AsyncSession,
        *,
        project_in: ProjectCreate,
        current_user: User,
    ) -> Project:
        if project_in.organization_id is not None:
            if await crud_organization.get(db, project_in.organization_id) is None:
                raise InvalidRecord({"organization_id": ["is invalid"]})

        if project_in.permalink is not None:
            await self._assert_permalink_free(db, project_in.permalink)
            permalink = project_in.permalink
        else:
            permalink = await crud_project.unique_permalink(db, project_in.name)

        project = await crud_project.create_project(
            db,
            name=project_in.name,
            permalink=permalink,
            owner_id=current_user.id,
            organization_id=project_in.organization_id,
        )
        logger.info("User id=%s created project id=%s", current_user.id, project.id)
        return project

    async def update_project(
        self,
        db: AsyncSession,
        *,
        project: Project,
        project_in: ProjectUpdate,
        current_user: User,
    ) -> Project:
        self._assert_admin(project, current_user)
        changes = project_in.model_dump(exclude_unset=True, exclude_none=True)
        if "permalink" in changes and changes["permalink"] != project.permalink:
            await self._assert_permalink_free(db, changes["permalink"])
        return await crud_project.update(db, db_obj=project, obj_in=changes)

    async def delete_project(
        self, db: AsyncSession, *, project: Project, current_user: User
    ) -> None:
        if project.user_id != current_user.id:
            raise InsufficientPermissions("Only the project owner can delete this project")
        await crud_project.remove(db, db_obj=project)
        logger.info("User id=%s deleted project id=%s", current_user.id, project.id)

    # ── People ────────────────────────────────────────────────────────────────

    async def get_person(self, db: AsyncSession, *, project: Project, person_id: int) -> Person:
        person = await crud_person.get_by_id(
            db, person_id, Person.project_id == project.id
        )
        if person is None:
            raise ObjectNotFound("Person not found")
        return person

    async def add_person(
        self,
        db: AsyncSession,
        *,
        project: Project,
        person_in: PersonCreate,
        current_user: User,
    ) -> Person:
        self._assert_admin(project, current_user)
        self._assert_assignable_role(person_in.role)
        if await crud_user.get(db, person_in.user_id) is None:
            raise InvalidRecord({"user_id": ["is invalid"]})
        if await crud_person.is_member(db, project_id=project.id, user_id=person_in.user_id):
            raise InvalidRecord({"user_id": ["is already a member of this project"]})

        person = await crud_person.create_from_dict(
            db,
            obj_in={
                "project_id": project.id,
                "user_id": person_in.user_id,
                "role": int(person_in.role),
            },
        )
        logger.info(
            "User id=%s added user id=%s to project id=%s as %s",
            current_user.id, person.user_id, project.id, person_in.role.name.lower(),
        )
        return person

    async def update_person(
        self,
        db: AsyncSession,
        *,
        project: Project,
        person_id: int,
        person_in: PersonUpdate,
        current_user: User,
    ) -> Person:
        self._assert_admin(project, current_user)
        self._assert_assignable_role(person_in.role)
        person = await self.get_person(db, project=project, person_id=person_id)
        return await crud_person.update(db, db_obj=person, obj_in={"role": int(person_in.role)})

    async def remove_person(
        self,
        db: AsyncSession,
        *,
        project: Project,
        person_id: int,
        current_user: User,
    ) -> None:
        person = await self.get_person(db, project=project, person_id=person_id)
        if person.user_id != current_user.id:
            self._assert_admin(project, current_user)
        if person.user_id == project.user_id:
            raise InsufficientPermissions("The project owner cannot leave the project")
        await crud_person.remove(db, db_obj=person)

    # ── Private helpers ───────────────────────────────────────────────────────

    def _assert_admin(self, project: Project, user: User) -> None:
        if not project.admin(user):
            raise InsufficientPermissions("Only project admins can do that")

    def _assert_assignable_role(self, role: PersonRole) -> None:
        if role == PersonRole.OWNER:
            raise InvalidRecord({"role": ["is not assignable"]})

    async def _assert_permalink_free(self, db: AsyncSession, permalink: str) -> None:
        if permalink.isdigit():
            raise InvalidRecord({"permalink": ["can't be a number"]})
        if await crud_project.exists(db, permalink=permalink):
            raise InvalidRecord({"permalink": ["has already been taken"]})


project_service = ProjectService()

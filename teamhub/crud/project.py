"""
Project, Person and Organization CRUD operations.
Projects are always read with their people so role checks need no
further queries.
"""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from teamhub.crud.base import CRUDBase
from teamhub.models.organization import Organization
from teamhub.models.project import Person, PersonRole, Project
from teamhub.schemas.pagination import ListParams


class CRUDProject(CRUDBase[Project]):
    load_options = (selectinload(Project.people),)

    async def project_ids_for_user(self, db: AsyncSession, *, user_id: int) -> list[int]:
        """Ids of every project the user has a membership in."""
        result = await db.execute(select(Person.project_id).where(Person.user_id == user_id))
        return [row[0] for row in result.all()]

    async def list_for_user(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        params: ListParams,
        organization_id: int | None = None,
        archived: bool | None = None,
    ) -> list[Project]:
        conditions = [Project.id.in_(select(Person.project_id).where(Person.user_id == user_id))]
        if organization_id is not None:
            conditions.append(Project.organization_id == organization_id)
        if archived is not None:
            conditions.append(Project.archived.is_(archived))
        return await self.list_page(db, *conditions, params=params)

    async def create_project(
        self,
        db: AsyncSession,
        *,
        name: str,
        permalink: str,
        owner_id: int,
        organization_id: int | None = None,
    ) -> Project:
        """Create a project; the owner joins it as an admin."""
        project = Project(
            name=name,
            permalink=permalink,
            user_id=owner_id,
            organization_id=organization_id,
        )
        db.add(project)
        await db.flush()
        db.add(Person(project_id=project.id, user_id=owner_id, role=int(PersonRole.ADMIN)))
        await db.flush()
        return await self.get(db, project.id)  # type: ignore[return-value]


class CRUDPerson(CRUDBase[Person]):

    async def is_member(self, db: AsyncSession, *, project_id: int, user_id: int) -> bool:
        return await self.exists(db, project_id=project_id, user_id=user_id)


class CRUDOrganization(CRUDBase[Organization]):

    async def list_for_user(
        self, db: AsyncSession, *, user_id: int, params: ListParams
    ) -> list[Organization]:
        """Organizations owning at least one of the user's projects."""
        member_projects = select(Project.organization_id).where(
            Project.id.in_(select(Person.project_id).where(Person.user_id == user_id))
        )
        return await self.list_page(
            db, Organization.id.in_(member_projects), params=params
        )


crud_project = CRUDProject(Project)
crud_person = CRUDPerson(Person)
crud_organization = CRUDOrganization(Organization)

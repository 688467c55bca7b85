"""
Page and note service.
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.exceptions import InsufficientPermissions, ObjectNotFound
from teamhub.crud.page import crud_note, crud_page, crud_upload
from teamhub.crud.project import crud_project
from teamhub.models.page import Note, Page, Upload
from teamhub.models.project import Project
from teamhub.models.user import User
from teamhub.schemas.page import NoteCreate, PageCreate

logger = logging.getLogger(__name__)


class PageService:

    async def create_page(
        self,
        db: AsyncSession,
        *,
        project: Project,
        page_in: PageCreate,
        current_user: User,
    ) -> Page:
        self._assert_editable(project, current_user)
        permalink = await crud_page.unique_permalink(
            db, page_in.name, Page.project_id == project.id
        )
        page = await crud_page.create_from_dict(
            db,
            obj_in={
                "name": page_in.name,
                "permalink": permalink,
                "description": page_in.description,
                "project_id": project.id,
                "user_id": current_user.id,
            },
        )
        logger.info("User id=%s created page id=%s", current_user.id, page.id)
        return page

    async def create_note(
        self,
        db: AsyncSession,
        *,
        project: Project,
        page: Page,
        note_in: NoteCreate,
        current_user: User,
    ) -> Note:
        """Append a note to the end of the page."""
        self._assert_editable(project, current_user)
        position = await crud_page.next_position(db, page_id=page.id)
        return await crud_note.create_note(
            db,
            page=page,
            user_id=current_user.id,
            name=note_in.name,
            body=note_in.body,
            position=position,
        )

    async def get_visible_upload(
        self, db: AsyncSession, *, upload_id: int, current_user: User
    ) -> Upload:
        project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
        upload = await crud_upload.get_by_id(
            db, upload_id, Upload.project_id.in_(project_ids)
        )
        if upload is None:
            raise ObjectNotFound("Upload not found")
        return upload

    def _assert_editable(self, project: Project, user: User) -> None:
        if not project.editable(user):
            raise InsufficientPermissions("You are not allowed to do that!")


page_service = PageService()

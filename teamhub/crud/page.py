"""
Page, Note and Upload CRUD operations.
Notes and uploads are read with their page slot.
"""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from teamhub.crud.base import CRUDBase
from teamhub.models.page import Note, Page, PageSlot, Upload
from teamhub.schemas.pagination import ListParams


class CRUDPage(CRUDBase[Page]):

    async def list_in_projects(
        self, db: AsyncSession, *, project_ids: list[int], params: ListParams
    ) -> list[Page]:
        return await self.list_page(db, Page.project_id.in_(project_ids), params=params)

    async def next_position(self, db: AsyncSession, *, page_id: int) -> int:
        result = await db.execute(
            select(func.max(PageSlot.position)).where(PageSlot.page_id == page_id)
        )
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1


class CRUDNote(CRUDBase[Note]):
    load_options = (selectinload(Note.page_slot),)

    async def list_for_page(
        self, db: AsyncSession, *, page_id: int, params: ListParams
    ) -> list[Note]:
        return await self.list_page(db, Note.page_id == page_id, params=params)

    async def create_note(
        self,
        db: AsyncSession,
        *,
        page: Page,
        user_id: int,
        name: str,
        body: str | None,
        position: int,
    ) -> Note:
        """Create a note and the slot placing it on its page."""
        note = Note(
            name=name,
            body=body,
            page_id=page.id,
            project_id=page.project_id,
            user_id=user_id,
        )
        db.add(note)
        await db.flush()
        db.add(
            PageSlot(
                page_id=page.id,
                rel_object_type="Note",
                rel_object_id=note.id,
                position=position,
            )
        )
        await db.flush()
        return await self.get(db, note.id)  # type: ignore[return-value]


class CRUDUpload(CRUDBase[Upload]):
    load_options = (selectinload(Upload.page_slot),)

    async def list_for_page(
        self, db: AsyncSession, *, page_id: int, params: ListParams
    ) -> list[Upload]:
        return await self.list_page(db, Upload.page_id == page_id, params=params)


crud_page = CRUDPage(Page)
crud_note = CRUDNote(Note)
crud_upload = CRUDUpload(Upload)

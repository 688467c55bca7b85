"""
TaskList, Task and Watcher CRUD operations.
Tasks are read with their comment thread and watchers.
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from teamhub.crud.base import CRUDBase
from teamhub.models.task import Task
from teamhub.models.task_list import TaskList
from teamhub.models.watcher import Watcher
from teamhub.schemas.pagination import ListParams


class CRUDTaskList(CRUDBase[TaskList]):

    async def list_in_projects(
        self,
        db: AsyncSession,
        *,
        project_ids: list[int],
        params: ListParams,
        archived: bool | None = None,
    ) -> list[TaskList]:
        conditions = [TaskList.project_id.in_(project_ids)]
        if archived is not None:
            conditions.append(TaskList.archived.is_(archived))
        return await self.list_page(db, *conditions, params=params)


class CRUDTask(CRUDBase[Task]):
    load_options = (selectinload(Task.comments), selectinload(Task.watchers))

    async def list_in_projects(
        self,
        db: AsyncSession,
        *,
        project_ids: list[int],
        params: ListParams,
        task_list_id: int | None = None,
    ) -> list[Task]:
        conditions = [Task.project_id.in_(project_ids)]
        if task_list_id is not None:
            conditions.append(Task.task_list_id == task_list_id)
        return await self.list_page(db, *conditions, params=params)


class CRUDWatcher(CRUDBase[Watcher]):

    async def get_watch(
        self, db: AsyncSession, *, user_id: int, watchable_type: str, watchable_id: int
    ) -> Watcher | None:
        return await self.get_where(
            db,
            Watcher.user_id == user_id,
            Watcher.watchable_type == watchable_type,
            Watcher.watchable_id == watchable_id,
        )

    async def watch(
        self, db: AsyncSession, *, user_id: int, watchable_type: str, watchable_id: int
    ) -> Watcher:
        existing = await self.get_watch(
            db, user_id=user_id, watchable_type=watchable_type, watchable_id=watchable_id
        )
        if existing is not None:
            return existing
        return await self.create_from_dict(
            db,
            obj_in={
                "user_id": user_id,
                "watchable_type": watchable_type,
                "watchable_id": watchable_id,
            },
        )

    async def unwatch(
        self, db: AsyncSession, *, user_id: int, watchable_type: str, watchable_id: int
    ) -> None:
        existing = await self.get_watch(
            db, user_id=user_id, watchable_type=watchable_type, watchable_id=watchable_id
        )
        if existing is not None:
            await self.remove(db, db_obj=existing)


crud_task_list = CRUDTaskList(TaskList)
crud_task = CRUDTask(Task)
crud_watcher = CRUDWatcher(Watcher)

"""
Task business logic service.
Enforces project roles for task lists and tasks, seeds a task's comment
thread and keeps its watchers.
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.core.exceptions import InsufficientPermissions, InvalidRecord, ObjectNotFound
from teamhub.crud.comment import crud_comment
from teamhub.crud.project import crud_person, crud_project
from teamhub.crud.task import crud_task, crud_task_list, crud_watcher
from teamhub.models.project import Person, Project
from teamhub.models.task import Task
from teamhub.models.task_list import TaskList
from teamhub.models.user import User
from teamhub.schemas.task import TaskCreate, TaskListCreate, TaskUpdate

logger = logging.getLogger(__name__)


class TaskService:

    async def create_task_list(
        self,
        db: AsyncSession,
        *,
        project: Project,
        task_list_in: TaskListCreate,
        current_user: User,
    ) -> TaskList:
        self._assert_editable(project, current_user)
        permalink = await crud_task_list.unique_permalink(
            db, task_list_in.name, TaskList.project_id == project.id
        )
        task_list = await crud_task_list.create_from_dict(
            db,
            obj_in={
                "name": task_list_in.name,
                "permalink": permalink,
                "project_id": project.id,
                "user_id": current_user.id,
            },
        )
        logger.info("User id=%s created task list id=%s", current_user.id, task_list.id)
        return task_list

    async def create_task(
        self,
        db: AsyncSession,
        *,
        project: Project,
        task_list: TaskList,
        task_in: TaskCreate,
        current_user: User,
    ) -> Task:
        """
        Create a task in a task list.
        A body becomes the first comment of the thread; the creator watches
        the task.
        """
        self._assert_editable(project, current_user)
        if task_in.assigned_id is not None:
            await self._assert_assignable(db, project=project, person_id=task_in.assigned_id)

        task = await crud_task.create_from_dict(
            db,
            obj_in={
                "name": task_in.name,
                "status": task_in.status,
                "assigned_id": task_in.assigned_id,
                "due_on": task_in.due_on,
                "project_id": project.id,
                "task_list_id": task_list.id,
                "user_id": current_user.id,
            },
        )
        if task_in.body:
            await crud_comment.create_comment(
                db,
                body=task_in.body,
                project_id=project.id,
                user_id=current_user.id,
                target_type="Task",
                target_id=task.id,
            )
        await crud_watcher.watch(
            db, user_id=current_user.id, watchable_type="Task", watchable_id=task.id
        )
        logger.info("User id=%s created task id=%s", current_user.id, task.id)
        return await crud_task.get(db, task.id)  # type: ignore[return-value]

    async def get_visible_task(
        self, db: AsyncSession, *, task_id: int, current_user: User
    ) -> Task:
        """A task from one of the user's projects; anything else is not found."""
        project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
        task = await crud_task.get_by_id(
            db, task_id, Task.project_id.in_(project_ids)
        )
        if task is None:
            raise ObjectNotFound("Task not found")
        return task

    async def update_task(
        self,
        db: AsyncSession,
        *,
        task_id: int,
        task_in: TaskUpdate,
        current_user: User,
    ) -> Task:
        task = await self.get_visible_task(db, task_id=task_id, current_user=current_user)
        project = await crud_project.get(db, task.project_id)
        self._assert_editable(project, current_user)

        changes = task_in.model_dump(exclude_unset=True)
        if changes.get("assigned_id") is not None:
            await self._assert_assignable(db, project=project, person_id=changes["assigned_id"])
        return await crud_task.update(db, db_obj=task, obj_in=changes)

    async def watch(self, db: AsyncSession, *, task_id: int, current_user: User) -> Task:
        task = await self.get_visible_task(db, task_id=task_id, current_user=current_user)
        await crud_watcher.watch(
            db, user_id=current_user.id, watchable_type="Task", watchable_id=task.id
        )
        return await crud_task.get(db, task.id)  # type: ignore[return-value]

    async def unwatch(self, db: AsyncSession, *, task_id: int, current_user: User) -> Task:
        task = await self.get_visible_task(db, task_id=task_id, current_user=current_user)
        await crud_watcher.unwatch(
            db, user_id=current_user.id, watchable_type="Task", watchable_id=task.id
        )
        return await crud_task.get(db, task.id)  # type: ignore[return-value]

    # ── Private helpers ───────────────────────────────────────────────────────

    def _assert_editable(self, project: Project | None, user: User) -> None:
        if project is None or not project.editable(user):
            raise InsufficientPermissions("You are not allowed to do that!")

    async def _assert_assignable(
        self, db: AsyncSession, *, project: Project, person_id: int
    ) -> None:
        person = await crud_person.get_by_id(
            db, person_id, Person.project_id == project.id
        )
        if person is None:
            raise InvalidRecord({"assigned_id": ["is not a member of this project"]})


task_service = TaskService()

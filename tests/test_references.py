"""
Reference expansion and response wrapping tests, run against the data
layer directly.
"""
from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.models import (
    Comment,
    Conversation,
    Person,
    PersonRole,
    Project,
    Task,
    TaskList,
    User,
)
from teamhub.services.reference_service import merge_references, reference_service, unique
from teamhub.services.response_service import response_service, to_api

pytestmark = pytest.mark.asyncio


def summary(records: list) -> list[tuple[str, int]]:
    return [(type(record).__name__, record.id) for record in records]


@pytest_asyncio.fixture
async def world(db: AsyncSession) -> dict:
    """Two users, a project, a task with three comments and a conversation."""
    owner = User(username="owner", email="owner@example.com", hashed_password="x")
    member = User(username="member", email="member@example.com", hashed_password="x")
    db.add_all([owner, member])
    await db.flush()

    project = Project(name="Refs", permalink="refs", user_id=owner.id)
    db.add(project)
    await db.flush()
    person = Person(user_id=member.id, project_id=project.id, role=int(PersonRole.PARTICIPANT))
    task_list = TaskList(name="List", permalink="list", project_id=project.id, user_id=owner.id)
    db.add_all([person, task_list])
    await db.flush()

    task = Task(
        name="Task",
        project_id=project.id,
        task_list_id=task_list.id,
        user_id=owner.id,
        assigned_id=person.id,
    )
    conversation = Conversation(name="Chat", project_id=project.id, user_id=member.id)
    db.add_all([task, conversation])
    await db.flush()

    comments = [
        Comment(
            body=f"comment {index}",
            project_id=project.id,
            user_id=member.id if index else owner.id,
            target_type="Task",
            target_id=task.id,
        )
        for index in range(3)
    ]
    db.add_all(comments)
    await db.commit()
    # Server-side timestamps are expired after the insert.
    for record in [owner, member, project, person, task_list, task, conversation, *comments]:
        await db.refresh(record)
    return {
        "owner": owner,
        "member": member,
        "project": project,
        "person": person,
        "task_list": task_list,
        "task": task,
        "conversation": conversation,
        "comments": comments,
    }


class TestLoadReferences:
    async def test_task_brings_first_and_recent_comments(
        self, db: AsyncSession, world: dict
    ) -> None:
        task, comments = world["task"], world["comments"]
        records = await reference_service.load_references(db, {"tasks": [task.id]})

        assert summary(records) == [
            ("Task", task.id),
            ("Comment", comments[0].id),
            ("Comment", comments[2].id),
            ("Comment", comments[1].id),
            ("User", world["owner"].id),
            ("User", world["member"].id),
        ]

    async def test_users_and_people_come_last(self, db: AsyncSession, world: dict) -> None:
        records = await reference_service.load_references(
            db,
            {
                "people": [world["person"].id],
                "users": [world["owner"].id],
                "projects": [world["project"].id],
            },
        )
        assert summary(records) == [
            ("Project", world["project"].id),
            ("User", world["owner"].id),
            ("User", world["member"].id),
            ("Person", world["person"].id),
        ]

    async def test_elements_are_deduplicated(self, db: AsyncSession, world: dict) -> None:
        task, comments = world["task"], world["comments"]
        records = await reference_service.load_references(
            db, {"tasks": [task.id, task.id], "comments": [comments[0].id]}
        )
        elements = [record for record in records if not isinstance(record, User)]
        assert len(elements) == len(unique(elements))
        assert summary(elements).count(("Comment", comments[0].id)) == 1

    async def test_unknown_association_is_skipped(
        self, db: AsyncSession, world: dict, caplog: pytest.LogCaptureFixture
    ) -> None:
        records = await reference_service.load_references(
            db, {"gizmos": [1], "task_lists": [world["task_list"].id]}
        )
        assert summary(records)[0] == ("TaskList", world["task_list"].id)
        assert "gizmos" in caplog.text

    async def test_missing_ids_are_ignored(self, db: AsyncSession, world: dict) -> None:
        records = await reference_service.load_references(db, {"conversations": [999]})
        assert records == []

    async def test_merge_references(self) -> None:
        assert merge_references(
            [{"users": [1, None], "projects": [2]}, {"users": [1, 3]}]
        ) == {"users": [1, 3], "projects": [2]}


class TestApiWrap:
    async def test_single_object_with_references(self, db: AsyncSession, world: dict) -> None:
        task = world["task"]
        payload = await response_service.api_wrap(db, task, references=True)

        assert payload["type"] == "Task"
        assert payload["id"] == task.id
        refs = {(ref["type"], ref["id"]) for ref in payload["references"]}
        assert refs == {
            ("Project", world["project"].id),
            ("TaskList", world["task_list"].id),
            ("User", world["owner"].id),
            ("User", world["member"].id),
            ("Person", world["person"].id),
        }

    async def test_list_with_named_references(self, db: AsyncSession, world: dict) -> None:
        from sqlalchemy import select
        from sqlalchemy.orm import selectinload

        result = await db.execute(
            select(Conversation).options(
                selectinload(Conversation.project),
                selectinload(Conversation.user),
                selectinload(Conversation.comments),
                selectinload(Conversation.watchers),
            )
        )
        conversations = list(result.scalars().all())
        payload = await response_service.api_wrap(
            db, conversations, references=["project", "user"]
        )

        assert payload["type"] == "List"
        assert [obj["type"] for obj in payload["objects"]] == ["Conversation"]
        assert [(ref["type"], ref["id"]) for ref in payload["references"]] == [
            ("Project", world["project"].id),
            ("User", world["member"].id),
        ]

    async def test_to_api_hides_secrets(self, world: dict) -> None:
        data = to_api(world["owner"])
        assert data["type"] == "User"
        assert "hashed_password" not in data
        assert "email" not in data

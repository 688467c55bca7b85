"""
Task list, task, comment and conversation tests.
Covers: role requirements, the comment thread of tasks and conversations,
watchers, scoping of id-addressed records and search.
"""
from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

from conftest import API, basic
from teamhub.models.project import PersonRole

pytestmark = pytest.mark.asyncio


async def create_task(
    client: AsyncClient, project: dict, task_list: dict, username: str = "alice", **fields: Any
):
    return await client.post(
        f"{API}/projects/{project['id']}/task_lists/{task_list['id']}/tasks",
        json={"name": "Ship it", **fields},
        auth=basic(username),
    )


class TestTaskLists:
    async def test_create_and_show(self, client: AsyncClient, project: dict, task_list: dict) -> None:
        assert task_list["type"] == "TaskList"
        assert task_list["permalink"] == "launch"

        by_permalink = await client.get(
            f"{API}/projects/{project['id']}/task_lists/launch", auth=basic("alice")
        )
        assert by_permalink.status_code == 200
        assert by_permalink.json()["id"] == task_list["id"]

    async def test_missing_task_list(self, client: AsyncClient, project: dict) -> None:
        response = await client.get(
            f"{API}/projects/{project['id']}/task_lists/999", auth=basic("alice")
        )
        assert response.status_code == 404
        assert response.json()["errors"]["message"] == "TaskList not found"

    async def test_task_list_of_another_project(
        self, client: AsyncClient, project: dict, task_list: dict
    ) -> None:
        other = await client.post(f"{API}/projects", json={"name": "Other"}, auth=basic("alice"))
        response = await client.get(
            f"{API}/projects/{other.json()['id']}/task_lists/{task_list['id']}",
            auth=basic("alice"),
        )
        assert response.status_code == 404

    async def test_observer_cannot_create(
        self, client: AsyncClient, project: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.OBSERVER)
        response = await client.post(
            f"{API}/projects/{project['id']}/task_lists",
            json={"name": "Nope"},
            auth=basic("bob"),
        )
        assert response.status_code == 401
        assert response.json()["errors"]["type"] == "InsufficientPermissions"

    async def test_list_across_projects(
        self, client: AsyncClient, task_list: dict, bob: dict
    ) -> None:
        mine = await client.get(f"{API}/task_lists", auth=basic("alice"))
        theirs = await client.get(f"{API}/task_lists", auth=basic("bob"))
        assert [t["id"] for t in mine.json()["objects"]] == [task_list["id"]]
        assert theirs.json()["objects"] == []


class TestTasks:
    async def test_create_with_body(
        self, client: AsyncClient, project: dict, task_list: dict, alice: dict
    ) -> None:
        response = await create_task(client, project, task_list, body="First things first")
        assert response.status_code == 201
        task = response.json()
        assert task["type"] == "Task"
        assert task["status"] == "new"
        assert task["comments_count"] == 1
        assert task["first_comment_id"] is not None
        assert task["recent_comment_ids"] == [task["first_comment_id"]]
        assert task["watcher_ids"] == [alice["id"]]

        types = {ref["type"] for ref in task["references"]}
        assert {"User", "Project", "TaskList"} <= types

    async def test_assign_to_member(
        self, client: AsyncClient, project: dict, task_list: dict, bob: dict, add_member
    ) -> None:
        person = await add_member(bob, PersonRole.PARTICIPANT)
        response = await create_task(client, project, task_list, assigned_id=person["id"])
        assert response.status_code == 201
        task = response.json()
        assert task["assigned_id"] == person["id"]

        refs = {(ref["type"], ref["id"]) for ref in task["references"]}
        assert ("Person", person["id"]) in refs
        assert ("User", bob["id"]) in refs

    async def test_assign_to_stranger(
        self, client: AsyncClient, project: dict, task_list: dict
    ) -> None:
        response = await create_task(client, project, task_list, assigned_id=12345)
        assert response.status_code == 422
        assert response.json()["errors"]["assigned_id"] == ["is not a member of this project"]

    async def test_invalid_status(
        self, client: AsyncClient, project: dict, task_list: dict
    ) -> None:
        response = await create_task(client, project, task_list, status="done")
        assert response.status_code == 422
        assert "status" in response.json()["errors"]

    async def test_show_task_outside_projects(
        self, client: AsyncClient, project: dict, task_list: dict, bob: dict
    ) -> None:
        task = (await create_task(client, project, task_list)).json()
        response = await client.get(f"{API}/tasks/{task['id']}", auth=basic("bob"))
        assert response.status_code == 404
        assert response.json()["errors"]["message"] == "Task not found"

    async def test_update_task(
        self, client: AsyncClient, project: dict, task_list: dict
    ) -> None:
        task = (await create_task(client, project, task_list)).json()
        response = await client.put(
            f"{API}/tasks/{task['id']}",
            json={"status": "resolved", "due_on": "2026-12-01"},
            auth=basic("alice"),
        )
        assert response.status_code == 200

        shown = await client.get(f"{API}/tasks/{task['id']}", auth=basic("alice"))
        assert shown.json()["status"] == "resolved"
        assert shown.json()["due_on"] == "2026-12-01"

    async def test_commenter_cannot_update(
        self, client: AsyncClient, project: dict, task_list: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.COMMENTER)
        task = (await create_task(client, project, task_list)).json()
        response = await client.put(
            f"{API}/tasks/{task['id']}", json={"status": "hold"}, auth=basic("bob")
        )
        assert response.status_code == 401

    async def test_list_filters(
        self, client: AsyncClient, project: dict, task_list: dict
    ) -> None:
        other_list = await client.post(
            f"{API}/projects/{project['id']}/task_lists",
            json={"name": "Backlog"},
            auth=basic("alice"),
        )
        first = (await create_task(client, project, task_list)).json()
        second = (await create_task(client, project, other_list.json())).json()

        in_project = await client.get(f"{API}/projects/{project['id']}/tasks", auth=basic("alice"))
        assert [t["id"] for t in in_project.json()["objects"]] == [second["id"], first["id"]]

        in_list = await client.get(
            f"{API}/projects/{project['id']}/task_lists/{task_list['id']}/tasks",
            auth=basic("alice"),
        )
        assert [t["id"] for t in in_list.json()["objects"]] == [first["id"]]

        by_query = await client.get(
            f"{API}/tasks", params={"task_list_id": "backlog"}, auth=basic("alice")
        )
        assert [t["id"] for t in by_query.json()["objects"]] == [second["id"]]

    async def test_watch_and_unwatch(
        self, client: AsyncClient, project: dict, task_list: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.OBSERVER)
        task = (await create_task(client, project, task_list)).json()

        watched = await client.post(f"{API}/tasks/{task['id']}/watch", auth=basic("bob"))
        assert watched.status_code == 200
        shown = await client.get(f"{API}/tasks/{task['id']}", auth=basic("bob"))
        assert bob["id"] in shown.json()["watcher_ids"]

        await client.post(f"{API}/tasks/{task['id']}/unwatch", auth=basic("bob"))
        shown = await client.get(f"{API}/tasks/{task['id']}", auth=basic("bob"))
        assert bob["id"] not in shown.json()["watcher_ids"]


class TestComments:
    async def test_thread_tracks_recent_comments(
        self, client: AsyncClient, project: dict, task_list: dict
    ) -> None:
        task = (await create_task(client, project, task_list, body="one")).json()
        ids = [task["first_comment_id"]]
        for body in ("two", "three"):
            response = await client.post(
                f"{API}/tasks/{task['id']}/comments", json={"body": body}, auth=basic("alice")
            )
            assert response.status_code == 201
            ids.append(response.json()["id"])

        shown = (await client.get(f"{API}/tasks/{task['id']}", auth=basic("alice"))).json()
        assert shown["comments_count"] == 3
        assert shown["first_comment_id"] == ids[0]
        assert shown["recent_comment_ids"] == [ids[2], ids[1]]

    async def test_comment_references_include_thread(
        self, client: AsyncClient, project: dict, task_list: dict
    ) -> None:
        task = (await create_task(client, project, task_list, body="opening")).json()
        response = await client.post(
            f"{API}/tasks/{task['id']}/comments", json={"body": "reply"}, auth=basic("alice")
        )
        comment = response.json()
        refs = [(ref["type"], ref["id"]) for ref in comment["references"]]
        assert ("Task", task["id"]) in refs
        assert ("Comment", task["first_comment_id"]) in refs
        assert ("Comment", comment["id"]) in refs
        assert refs.index(("Task", task["id"])) < refs.index(("Comment", task["first_comment_id"]))

    async def test_observer_cannot_comment(
        self, client: AsyncClient, project: dict, task_list: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.OBSERVER)
        task = (await create_task(client, project, task_list)).json()
        response = await client.post(
            f"{API}/tasks/{task['id']}/comments", json={"body": "hi"}, auth=basic("bob")
        )
        assert response.status_code == 401

    async def test_list_comments(
        self, client: AsyncClient, project: dict, task_list: dict
    ) -> None:
        task = (await create_task(client, project, task_list, body="one")).json()
        await client.post(
            f"{API}/tasks/{task['id']}/comments", json={"body": "two"}, auth=basic("alice")
        )
        response = await client.get(
            f"{API}/tasks/{task['id']}/comments", params={"count": 1}, auth=basic("alice")
        )
        data = response.json()
        assert data["type"] == "List"
        assert [c["body"] for c in data["objects"]] == ["two"]

    async def test_delete_comment_rules(
        self, client: AsyncClient, project: dict, task_list: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.COMMENTER)
        task = (await create_task(client, project, task_list, body="by alice")).json()

        refused = await client.delete(
            f"{API}/comments/{task['first_comment_id']}", auth=basic("bob")
        )
        assert refused.status_code == 401

        own = await client.post(
            f"{API}/tasks/{task['id']}/comments", json={"body": "by bob"}, auth=basic("bob")
        )
        deleted = await client.delete(f"{API}/comments/{own.json()['id']}", auth=basic("bob"))
        assert deleted.status_code == 200

        by_admin = await client.delete(
            f"{API}/comments/{task['first_comment_id']}", auth=basic("alice")
        )
        assert by_admin.status_code == 200
        gone = await client.get(f"{API}/comments/{task['first_comment_id']}", auth=basic("alice"))
        assert gone.status_code == 404


class TestConversations:
    async def test_create_simple_conversation(
        self, client: AsyncClient, project: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.COMMENTER)
        response = await client.post(
            f"{API}/projects/{project['id']}/conversations",
            json={"body": "Quick question"},
            auth=basic("bob"),
        )
        assert response.status_code == 201
        conversation = response.json()
        assert conversation["type"] == "Conversation"
        assert conversation["simple"] is True
        assert conversation["comments_count"] == 1

        shown = await client.get(
            f"{API}/conversations/{conversation['id']}/comments", auth=basic("alice")
        )
        assert [c["body"] for c in shown.json()["objects"]] == ["Quick question"]

    async def test_body_is_required(self, client: AsyncClient, project: dict) -> None:
        response = await client.post(
            f"{API}/projects/{project['id']}/conversations",
            json={"name": "Planning"},
            auth=basic("alice"),
        )
        assert response.status_code == 422
        assert "body" in response.json()["errors"]

    async def test_observer_cannot_start(
        self, client: AsyncClient, project: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.OBSERVER)
        response = await client.post(
            f"{API}/projects/{project['id']}/conversations",
            json={"name": "Planning", "body": "Let's plan"},
            auth=basic("bob"),
        )
        assert response.status_code == 401

    async def test_hidden_from_outsiders(
        self, client: AsyncClient, project: dict, bob: dict
    ) -> None:
        created = await client.post(
            f"{API}/projects/{project['id']}/conversations",
            json={"name": "Planning", "body": "Let's plan"},
            auth=basic("alice"),
        )
        response = await client.get(
            f"{API}/conversations/{created.json()['id']}", auth=basic("bob")
        )
        assert response.status_code == 404


class TestSearch:
    async def test_search_names(
        self, client: AsyncClient, project: dict, task_list: dict, alice: dict
    ) -> None:
        await create_task(client, project, task_list, name="Fix login bug")
        await create_task(client, project, task_list, name="Write docs")
        await client.post(
            f"{API}/projects/{project['id']}/conversations",
            json={"name": "Login redesign", "body": "Thoughts?"},
            auth=basic("alice"),
        )

        response = await client.get(f"{API}/search", params={"q": "login"}, auth=basic("alice"))
        assert response.status_code == 200
        data = response.json()
        assert sorted(obj["type"] for obj in data["objects"]) == ["Conversation", "Task"]
        assert sorted((ref["type"], ref["id"]) for ref in data["references"]) == [
            ("Project", project["id"]),
            ("User", alice["id"]),
        ]

    async def test_search_needs_query(self, client: AsyncClient, alice: dict) -> None:
        response = await client.get(f"{API}/search", auth=basic("alice"))
        assert response.status_code == 422
        assert "q" in response.json()["errors"]

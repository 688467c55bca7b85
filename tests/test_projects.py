"""
Project, people and guard tests.
Covers: project creation and lookup by id or permalink, the membership
guard, admin/owner rules, people management and list parameters.
"""
from __future__ import annotations

import pytest
from httpx import AsyncClient

from conftest import API, basic
from teamhub.models.project import PersonRole

pytestmark = pytest.mark.asyncio


class TestCreateProject:
    async def test_create_project(self, client: AsyncClient, alice: dict) -> None:
        response = await client.post(
            f"{API}/projects", json={"name": "Website Redesign"}, auth=basic("alice")
        )
        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "Project"
        assert data["permalink"] == "website-redesign"
        assert data["user_id"] == alice["id"]
        assert [(ref["type"], ref["id"]) for ref in data["references"]] == [
            ("User", alice["id"])
        ]

    async def test_permalinks_are_unique(self, client: AsyncClient, project: dict) -> None:
        response = await client.post(
            f"{API}/projects", json={"name": "Website Redesign"}, auth=basic("alice")
        )
        assert response.status_code == 201
        assert response.json()["permalink"] == "website-redesign-2"

    async def test_explicit_permalink_taken(self, client: AsyncClient, project: dict) -> None:
        response = await client.post(
            f"{API}/projects",
            json={"name": "Other", "permalink": "website-redesign"},
            auth=basic("alice"),
        )
        assert response.status_code == 422
        assert response.json()["errors"]["permalink"] == ["has already been taken"]

    async def test_numeric_permalink_rejected(self, client: AsyncClient, alice: dict) -> None:
        response = await client.post(
            f"{API}/projects",
            json={"name": "Numbers", "permalink": "2024"},
            auth=basic("alice"),
        )
        assert response.status_code == 422

    async def test_creator_is_admin_member(self, client: AsyncClient, project: dict) -> None:
        response = await client.get(
            f"{API}/projects/{project['id']}/people", auth=basic("alice")
        )
        assert response.status_code == 200
        people = response.json()["objects"]
        assert len(people) == 1
        assert people[0]["role"] == PersonRole.ADMIN


class TestProjectGuards:
    async def test_show_by_id_and_permalink(self, client: AsyncClient, project: dict) -> None:
        by_id = await client.get(f"{API}/projects/{project['id']}", auth=basic("alice"))
        by_permalink = await client.get(f"{API}/projects/website-redesign", auth=basic("alice"))
        assert by_id.status_code == 200
        assert by_permalink.status_code == 200
        assert by_id.json()["id"] == by_permalink.json()["id"] == project["id"]

    async def test_missing_project(self, client: AsyncClient, alice: dict) -> None:
        response = await client.get(f"{API}/projects/no-such-project", auth=basic("alice"))
        assert response.status_code == 404
        assert response.json() == {
            "errors": {"type": "ObjectNotFound", "message": "Project not found"}
        }

    @pytest.mark.parametrize(
        "identifier", ["\u00b2", "99999999999999999999", "2147483648"]
    )
    async def test_unmatchable_identifier_is_not_found(
        self, client: AsyncClient, alice: dict, identifier: str
    ) -> None:
        response = await client.get(f"{API}/projects/{identifier}", auth=basic("alice"))
        assert response.status_code == 404
        assert response.json()["errors"]["type"] == "ObjectNotFound"

    async def test_out_of_range_record_id_is_not_found(
        self, client: AsyncClient, alice: dict
    ) -> None:
        response = await client.get(
            f"{API}/tasks/2147483648", auth=basic("alice")
        )
        assert response.status_code == 404
        assert response.json()["errors"]["message"] == "Task not found"

    async def test_non_member_is_refused(
        self, client: AsyncClient, project: dict, bob: dict
    ) -> None:
        response = await client.get(f"{API}/projects/{project['id']}", auth=basic("bob"))
        assert response.status_code == 401
        assert response.json()["errors"] == {
            "type": "InsufficientPermissions",
            "message": "You are not allowed to do that!",
        }

    async def test_non_member_cannot_create_inside(
        self, client: AsyncClient, project: dict, bob: dict
    ) -> None:
        response = await client.post(
            f"{API}/projects/{project['id']}/task_lists",
            json={"name": "Sneaky"},
            auth=basic("bob"),
        )
        assert response.status_code == 401

    async def test_list_only_member_projects(
        self, client: AsyncClient, project: dict, bob: dict
    ) -> None:
        mine = await client.get(f"{API}/projects", auth=basic("alice"))
        theirs = await client.get(f"{API}/projects", auth=basic("bob"))
        assert [p["id"] for p in mine.json()["objects"]] == [project["id"]]
        assert theirs.json() == {"type": "List", "objects": [], "references": []}


class TestProjectAdministration:
    async def test_admin_updates_project(self, client: AsyncClient, project: dict) -> None:
        response = await client.put(
            f"{API}/projects/{project['id']}",
            json={"name": "Website Relaunch", "archived": True},
            auth=basic("alice"),
        )
        assert response.status_code == 200
        assert response.content == b""

        shown = await client.get(f"{API}/projects/{project['id']}", auth=basic("alice"))
        assert shown.json()["name"] == "Website Relaunch"
        assert shown.json()["archived"] is True

    async def test_js_success_body(self, client: AsyncClient, project: dict) -> None:
        response = await client.put(
            f"{API}/projects/{project['id']}",
            params={"format": "js", "callback": "done"},
            json={"name": "Renamed"},
            auth=basic("alice"),
        )
        assert response.status_code == 200
        assert response.text == 'done({"status": 200});'

    async def test_participant_cannot_update(
        self, client: AsyncClient, project: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.PARTICIPANT)
        response = await client.put(
            f"{API}/projects/{project['id']}", json={"name": "Mine now"}, auth=basic("bob")
        )
        assert response.status_code == 401
        assert response.json()["errors"]["type"] == "InsufficientPermissions"

    async def test_only_owner_deletes(
        self, client: AsyncClient, project: dict, bob: dict, add_member
    ) -> None:
        await add_member(bob, PersonRole.ADMIN)
        refused = await client.delete(f"{API}/projects/{project['id']}", auth=basic("bob"))
        assert refused.status_code == 401

        deleted = await client.delete(f"{API}/projects/{project['id']}", auth=basic("alice"))
        assert deleted.status_code == 200
        gone = await client.get(f"{API}/projects/{project['id']}", auth=basic("alice"))
        assert gone.status_code == 404


class TestPeople:
    async def test_add_person(
        self, client: AsyncClient, project: dict, alice: dict, bob: dict
    ) -> None:
        response = await client.post(
            f"{API}/projects/{project['id']}/people",
            json={"user_id": bob["id"], "role": PersonRole.COMMENTER},
            auth=basic("alice"),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "Person"
        assert data["role"] == PersonRole.COMMENTER
        types = {(ref["type"], ref["id"]) for ref in data["references"]}
        assert ("Project", project["id"]) in types
        assert ("User", bob["id"]) in types
        assert ("User", alice["id"]) in types

        shown = await client.get(f"{API}/projects/{project['id']}", auth=basic("bob"))
        assert shown.status_code == 200

    async def test_add_existing_member(
        self, client: AsyncClient, project: dict, alice: dict
    ) -> None:
        response = await client.post(
            f"{API}/projects/{project['id']}/people",
            json={"user_id": alice["id"]},
            auth=basic("alice"),
        )
        assert response.status_code == 422

    async def test_owner_role_not_assignable(
        self, client: AsyncClient, project: dict, bob: dict
    ) -> None:
        response = await client.post(
            f"{API}/projects/{project['id']}/people",
            json={"user_id": bob["id"], "role": PersonRole.OWNER},
            auth=basic("alice"),
        )
        assert response.status_code == 422
        assert response.json()["errors"]["role"] == ["is not assignable"]

    async def test_non_admin_cannot_add(
        self, client: AsyncClient, project: dict, bob: dict, register, add_member
    ) -> None:
        await add_member(bob, PersonRole.PARTICIPANT)
        carol = await register("carol")
        response = await client.post(
            f"{API}/projects/{project['id']}/people",
            json={"user_id": carol["id"]},
            auth=basic("bob"),
        )
        assert response.status_code == 401

    async def test_change_role(
        self, client: AsyncClient, project: dict, bob: dict, add_member
    ) -> None:
        person = await add_member(bob, PersonRole.OBSERVER)
        response = await client.put(
            f"{API}/projects/{project['id']}/people/{person['id']}",
            json={"role": PersonRole.ADMIN},
            auth=basic("alice"),
        )
        assert response.status_code == 200
        shown = await client.get(
            f"{API}/projects/{project['id']}/people/{person['id']}", auth=basic("bob")
        )
        assert shown.json()["role"] == PersonRole.ADMIN

    async def test_owner_cannot_be_removed(
        self, client: AsyncClient, project: dict
    ) -> None:
        people = await client.get(f"{API}/projects/{project['id']}/people", auth=basic("alice"))
        owner_membership = people.json()["objects"][0]
        response = await client.delete(
            f"{API}/projects/{project['id']}/people/{owner_membership['id']}",
            auth=basic("alice"),
        )
        assert response.status_code == 401

    async def test_member_can_leave(
        self, client: AsyncClient, project: dict, bob: dict, add_member
    ) -> None:
        person = await add_member(bob, PersonRole.OBSERVER)
        response = await client.delete(
            f"{API}/projects/{project['id']}/people/{person['id']}", auth=basic("bob")
        )
        assert response.status_code == 200
        shown = await client.get(f"{API}/projects/{project['id']}", auth=basic("bob"))
        assert shown.status_code == 401


class TestListParameters:
    async def _create_projects(self, client: AsyncClient, count: int) -> list[int]:
        ids = []
        for index in range(count):
            response = await client.post(
                f"{API}/projects", json={"name": f"Project {index}"}, auth=basic("alice")
            )
            ids.append(response.json()["id"])
        return ids

    async def test_newest_first_with_count(self, client: AsyncClient, alice: dict) -> None:
        ids = await self._create_projects(client, 4)
        response = await client.get(f"{API}/projects", params={"count": 2}, auth=basic("alice"))
        assert [p["id"] for p in response.json()["objects"]] == [ids[3], ids[2]]

    async def test_since_and_max_id(self, client: AsyncClient, alice: dict) -> None:
        ids = await self._create_projects(client, 4)
        response = await client.get(
            f"{API}/projects",
            params={"since_id": ids[0], "max_id": ids[3]},
            auth=basic("alice"),
        )
        assert [p["id"] for p in response.json()["objects"]] == [ids[2], ids[1]]

    @pytest.mark.parametrize("param", ["since_id", "max_id"])
    async def test_out_of_range_bounds_are_invalid(
        self, client: AsyncClient, alice: dict, param: str
    ) -> None:
        response = await client.get(
            f"{API}/projects", params={param: "99999999999999999999"}, auth=basic("alice")
        )
        assert response.status_code == 422
        errors = response.json()["errors"]
        assert errors["type"] == "InvalidRecord"
        assert param in errors

    async def test_archived_filter(self, client: AsyncClient, alice: dict) -> None:
        live, shelved = await self._create_projects(client, 2)
        await client.put(
            f"{API}/projects/{shelved}", json={"archived": True}, auth=basic("alice")
        )

        async def listed(**params: str) -> list[int]:
            response = await client.get(f"{API}/projects", params=params, auth=basic("alice"))
            return [p["id"] for p in response.json()["objects"]]

        assert await listed() == [shelved, live]
        assert await listed(archived="1") == [shelved]
        assert await listed(archived="true") == [shelved]
        assert await listed(archived="no") == [live]

    async def test_jsonp_rendering(self, client: AsyncClient, project: dict) -> None:
        response = await client.get(
            f"{API}/projects/{project['id']}",
            params={"format": "js", "callback": "handleProject"},
            auth=basic("alice"),
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/javascript")
        assert response.text.startswith("handleProject({")
        assert response.text.endswith(");")

    async def test_jsonp_error(self, client: AsyncClient, alice: dict) -> None:
        response = await client.get(
            f"{API}/projects/missing",
            params={"format": "js", "callback": "cb"},
            auth=basic("alice"),
        )
        assert response.status_code == 404
        assert response.text.startswith('cb({"errors"')

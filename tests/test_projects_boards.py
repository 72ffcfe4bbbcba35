"""프로젝트/보드 API 테스트.

Project and board API tests — Ownership rules, code uniqueness, member
management and the soft-delete cascade from projects to boards.
"""

import pytest_asyncio

from taskhub.models import UserRole
from tests.conftest import API, auth_header, make_token, make_user

PROJECTS = f"{API}/projects"
BOARDS = f"{API}/boards"


@pytest_asyncio.fixture
async def project(client, pm_token) -> dict:
    """pm 소유 프로젝트."""
    res = await client.post(PROJECTS, json={
        "code": "CORE", "name": "Core Platform", "description": "Backend services",
    }, headers=auth_header(pm_token))
    assert res.status_code == 201
    return res.json()


@pytest_asyncio.fixture
async def board(client, pm_token, project) -> dict:
    res = await client.post(f"{PROJECTS}/{project['id']}/boards", json={
        "code": "SPRINT1", "name": "Sprint 1",
    }, headers=auth_header(pm_token))
    assert res.status_code == 201
    return res.json()


class TestProjects:
    """프로젝트 CRUD 테스트."""

    async def test_create_defaults_owner_to_caller(self, project, pm_user):
        assert project["owner_id"] == str(pm_user.id)
        assert project["code"] == "CORE"

    async def test_create_with_owner(self, client, pmo_token, dev_user):
        res = await client.post(PROJECTS, json={
            "code": "WEB", "name": "Web", "owner_id": str(dev_user.id),
        }, headers=auth_header(pmo_token))
        assert res.status_code == 201
        assert res.json()["owner_id"] == str(dev_user.id)

    async def test_create_with_foreign_owner(self, client, pmo_token, other_user):
        res = await client.post(PROJECTS, json={
            "code": "WEB", "name": "Web", "owner_id": str(other_user.id),
        }, headers=auth_header(pmo_token))
        assert res.status_code == 404

    async def test_developer_cannot_create(self, client, dev_token):
        res = await client.post(PROJECTS, json={"code": "X", "name": "X"}, headers=auth_header(dev_token))
        assert res.status_code == 403

    async def test_duplicate_code(self, client, pm_token, project):
        res = await client.post(PROJECTS, json={"code": "CORE", "name": "Again"}, headers=auth_header(pm_token))
        assert res.status_code == 409

    async def test_same_code_in_other_tenant(self, client, other_token, project):
        res = await client.post(PROJECTS, json={"code": "CORE", "name": "Theirs"}, headers=auth_header(other_token))
        assert res.status_code == 201

    async def test_search(self, client, dev_token, project):
        res = await client.get(PROJECTS, params={"search": "backend"}, headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 1
        res = await client.get(PROJECTS, params={"search": "frontend"}, headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 0

    async def test_search_escapes_wildcards(self, client, dev_token, project):
        res = await client.get(PROJECTS, params={"search": "%"}, headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 0

    async def test_owner_updates(self, client, pm_token, project):
        res = await client.put(f"{PROJECTS}/{project['id']}", json={"name": "Core v2"}, headers=auth_header(pm_token))
        assert res.status_code == 200
        assert res.json()["name"] == "Core v2"

    async def test_non_owner_manager_cannot_update(self, client, db, org, project):
        tpm = await make_user(db, org, UserRole.TPM, "tpm@test.com", "Toni Tpm")
        res = await client.put(
            f"{PROJECTS}/{project['id']}", json={"name": "Hijack"}, headers=auth_header(make_token(tpm))
        )
        assert res.status_code == 403

    async def test_pmo_updates_any_project(self, client, pmo_token, project):
        res = await client.put(f"{PROJECTS}/{project['id']}", json={"code": "CORE2"}, headers=auth_header(pmo_token))
        assert res.status_code == 200
        assert res.json()["code"] == "CORE2"

    async def test_delete_cascades_to_boards(self, client, pm_token, project, board):
        res = await client.delete(f"{PROJECTS}/{project['id']}", headers=auth_header(pm_token))
        assert res.status_code == 204
        res = await client.get(f"{PROJECTS}/{project['id']}", headers=auth_header(pm_token))
        assert res.status_code == 404
        res = await client.get(f"{BOARDS}/{board['id']}", headers=auth_header(pm_token))
        assert res.status_code == 404


class TestProjectMembers:
    """프로젝트 멤버 테스트."""

    async def test_add_list_remove(self, client, pm_token, project, dev_user):
        url = f"{PROJECTS}/{project['id']}/members"
        res = await client.post(url, json={"user_id": str(dev_user.id)}, headers=auth_header(pm_token))
        assert res.status_code == 201
        member = res.json()
        assert member["user_name"] == "Dana Dev"
        assert member["parent_id"] == project["id"]

        res = await client.get(url, headers=auth_header(pm_token))
        assert res.json()["pagination"]["records"] == 1

        res = await client.delete(f"{url}/{member['id']}", headers=auth_header(pm_token))
        assert res.status_code == 204
        res = await client.get(url, headers=auth_header(pm_token))
        assert res.json()["pagination"]["records"] == 0

    async def test_duplicate_member(self, client, pm_token, project, dev_user):
        url = f"{PROJECTS}/{project['id']}/members"
        await client.post(url, json={"user_id": str(dev_user.id)}, headers=auth_header(pm_token))
        res = await client.post(url, json={"user_id": str(dev_user.id)}, headers=auth_header(pm_token))
        assert res.status_code == 409

    async def test_developer_cannot_add(self, client, dev_token, project, qa_user):
        res = await client.post(
            f"{PROJECTS}/{project['id']}/members", json={"user_id": str(qa_user.id)}, headers=auth_header(dev_token)
        )
        assert res.status_code == 403

    async def test_foreign_user(self, client, pm_token, project, other_user):
        res = await client.post(
            f"{PROJECTS}/{project['id']}/members", json={"user_id": str(other_user.id)}, headers=auth_header(pm_token)
        )
        assert res.status_code == 404


class TestBoards:
    """보드 CRUD 테스트."""

    async def test_create_and_list(self, client, dev_token, project, board):
        assert board["project_id"] == project["id"]
        res = await client.get(f"{PROJECTS}/{project['id']}/boards", headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 1

    async def test_duplicate_code_within_project(self, client, pm_token, project, board):
        res = await client.post(
            f"{PROJECTS}/{project['id']}/boards", json={"code": "SPRINT1", "name": "Dup"}, headers=auth_header(pm_token)
        )
        assert res.status_code == 409

    async def test_same_code_in_other_project(self, client, pm_token, board):
        other = (await client.post(PROJECTS, json={"code": "OPS", "name": "Ops"}, headers=auth_header(pm_token))).json()
        res = await client.post(
            f"{PROJECTS}/{other['id']}/boards", json={"code": "SPRINT1", "name": "Ops Sprint"}, headers=auth_header(pm_token)
        )
        assert res.status_code == 201

    async def test_developer_cannot_create(self, client, dev_token, project):
        res = await client.post(
            f"{PROJECTS}/{project['id']}/boards", json={"code": "B", "name": "B"}, headers=auth_header(dev_token)
        )
        assert res.status_code == 403

    async def test_owner_updates(self, client, pm_token, board):
        res = await client.put(f"{BOARDS}/{board['id']}", json={"name": "Sprint One"}, headers=auth_header(pm_token))
        assert res.status_code == 200
        assert res.json()["name"] == "Sprint One"

    async def test_developer_cannot_update(self, client, dev_token, board):
        res = await client.put(f"{BOARDS}/{board['id']}", json={"name": "Nope"}, headers=auth_header(dev_token))
        assert res.status_code == 403

    async def test_delete(self, client, pmo_token, board):
        res = await client.delete(f"{BOARDS}/{board['id']}", headers=auth_header(pmo_token))
        assert res.status_code == 204
        res = await client.get(f"{BOARDS}/{board['id']}", headers=auth_header(pmo_token))
        assert res.status_code == 404


class TestBoardMembers:
    """보드 멤버 테스트."""

    async def test_developer_joins_self(self, client, dev_token, dev_user, board):
        res = await client.post(
            f"{BOARDS}/{board['id']}/members", json={"user_id": str(dev_user.id)}, headers=auth_header(dev_token)
        )
        assert res.status_code == 201
        assert res.json()["user_id"] == str(dev_user.id)

    async def test_developer_cannot_add_others(self, client, dev_token, qa_user, board):
        res = await client.post(
            f"{BOARDS}/{board['id']}/members", json={"user_id": str(qa_user.id)}, headers=auth_header(dev_token)
        )
        assert res.status_code == 403

    async def test_manager_adds_and_member_leaves(self, client, pm_token, dev_token, dev_user, qa_token, board):
        url = f"{BOARDS}/{board['id']}/members"
        member = (await client.post(url, json={"user_id": str(dev_user.id)}, headers=auth_header(pm_token))).json()

        # 다른 비관리자는 제거 불가 (Another non-manager cannot remove the member)
        res = await client.delete(f"{url}/{member['id']}", headers=auth_header(qa_token))
        assert res.status_code == 403

        res = await client.delete(f"{url}/{member['id']}", headers=auth_header(dev_token))
        assert res.status_code == 204
        res = await client.get(f"{url}/{member['id']}", headers=auth_header(pm_token))
        assert res.status_code == 404

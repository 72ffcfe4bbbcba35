"""작업 코멘트/상태 변경 API 테스트.

Task comment and status change API tests — Authorship rules, filters and
the task status side effect of recording a change.
"""

import pytest_asyncio

from tests.conftest import API, auth_header

TASKS = f"{API}/tasks"


@pytest_asyncio.fixture
async def task(client, dev_token, statuses) -> dict:
    res = await client.post(TASKS, json={"title": "Ship release", "status_id": statuses["todo"]}, headers=auth_header(dev_token))
    return res.json()


class TestComments:
    """코멘트 테스트."""

    async def test_create_and_list(self, client, qa_token, qa_user, task):
        url = f"{TASKS}/{task['id']}/comments"
        res = await client.post(url, json={"comment_body": "Looks good to me"}, headers=auth_header(qa_token))
        assert res.status_code == 201
        comment = res.json()
        assert comment["commenter_id"] == str(qa_user.id)
        assert comment["task_id"] == task["id"]

        res = await client.get(url, headers=auth_header(qa_token))
        assert res.json()["pagination"]["records"] == 1

    async def test_empty_body(self, client, qa_token, task):
        res = await client.post(f"{TASKS}/{task['id']}/comments", json={"comment_body": ""}, headers=auth_header(qa_token))
        assert res.status_code == 422

    async def test_filters(self, client, qa_token, dev_token, dev_user, task):
        url = f"{TASKS}/{task['id']}/comments"
        await client.post(url, json={"comment_body": "Needs a changelog"}, headers=auth_header(qa_token))
        await client.post(url, json={"comment_body": "Changelog added"}, headers=auth_header(dev_token))

        res = await client.get(url, params={"commenter_id": str(dev_user.id)}, headers=auth_header(qa_token))
        assert [c["comment_body"] for c in res.json()["data"]] == ["Changelog added"]
        res = await client.get(url, params={"search": "NEEDS"}, headers=auth_header(qa_token))
        assert res.json()["pagination"]["records"] == 1
        res = await client.get(url, params={"created_at_from": "2100-01-01T00:00:00Z"}, headers=auth_header(qa_token))
        assert res.json()["pagination"]["records"] == 0

    async def test_only_author_edits(self, client, qa_token, pm_token, task):
        url = f"{TASKS}/{task['id']}/comments"
        comment = (await client.post(url, json={"comment_body": "Typo"}, headers=auth_header(qa_token))).json()

        res = await client.put(f"{url}/{comment['id']}", json={"comment_body": "Hijack"}, headers=auth_header(pm_token))
        assert res.status_code == 403
        res = await client.delete(f"{url}/{comment['id']}", headers=auth_header(pm_token))
        assert res.status_code == 403

        res = await client.put(f"{url}/{comment['id']}", json={"comment_body": "Fixed typo"}, headers=auth_header(qa_token))
        assert res.status_code == 200
        assert res.json()["comment_body"] == "Fixed typo"
        res = await client.delete(f"{url}/{comment['id']}", headers=auth_header(qa_token))
        assert res.status_code == 204
        res = await client.get(f"{url}/{comment['id']}", headers=auth_header(qa_token))
        assert res.status_code == 404

    async def test_comment_on_other_task_path(self, client, qa_token, dev_token, task):
        """다른 작업 경로로 코멘트 접근 시 404."""
        url = f"{TASKS}/{task['id']}/comments"
        comment = (await client.post(url, json={"comment_body": "Hi"}, headers=auth_header(qa_token))).json()
        other = (await client.post(TASKS, json={"title": "Other"}, headers=auth_header(dev_token))).json()
        res = await client.get(f"{TASKS}/{other['id']}/comments/{comment['id']}", headers=auth_header(qa_token))
        assert res.status_code == 404


class TestStatusChanges:
    """상태 변경 테스트."""

    async def test_change_moves_task(self, client, qa_token, qa_user, task, statuses):
        url = f"{TASKS}/{task['id']}/status-changes"
        res = await client.post(url, json={
            "new_status_id": statuses["in_progress"], "comment": "Picked up",
        }, headers=auth_header(qa_token))
        assert res.status_code == 201
        change = res.json()
        assert change["new_status_name"] == "In Progress"
        assert change["changed_by_id"] == str(qa_user.id)
        assert change["changed_at"] is not None

        detail = (await client.get(f"{TASKS}/{task['id']}", headers=auth_header(qa_token))).json()
        assert detail["status_id"] == statuses["in_progress"]

    async def test_explicit_changed_at(self, client, dev_token, task, statuses):
        res = await client.post(f"{TASKS}/{task['id']}/status-changes", json={
            "new_status_id": statuses["done"], "changed_at": "2026-09-30T12:00:00+09:00",
        }, headers=auth_header(dev_token))
        assert res.status_code == 201
        assert res.json()["changed_at"].startswith("2026-09-30T03:00:00")

    async def test_unknown_status(self, client, dev_token, other_token, task):
        foreign = (await client.get(f"{API}/task-statuses", headers=auth_header(other_token))).json()["data"][0]
        res = await client.post(
            f"{TASKS}/{task['id']}/status-changes", json={"new_status_id": foreign["id"]}, headers=auth_header(dev_token)
        )
        assert res.status_code == 404

    async def test_filters(self, client, dev_token, qa_token, qa_user, task, statuses):
        url = f"{TASKS}/{task['id']}/status-changes"
        await client.post(url, json={"new_status_id": statuses["in_progress"]}, headers=auth_header(dev_token))
        await client.post(url, json={"new_status_id": statuses["in_review"]}, headers=auth_header(qa_token))

        res = await client.get(url, params={"new_status_id": statuses["in_review"]}, headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 1
        res = await client.get(url, params={"changed_by_id": str(qa_user.id)}, headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 1
        res = await client.get(url, params={"changed_to": "2000-01-01T00:00:00Z"}, headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 0

    async def test_author_or_manager_modifies(self, client, dev_token, qa_token, pm_token, task, statuses):
        url = f"{TASKS}/{task['id']}/status-changes"
        change = (await client.post(url, json={"new_status_id": statuses["done"]}, headers=auth_header(dev_token))).json()

        res = await client.put(f"{url}/{change['id']}", json={"comment": "nope"}, headers=auth_header(qa_token))
        assert res.status_code == 403

        res = await client.put(f"{url}/{change['id']}", json={"comment": "Released"}, headers=auth_header(dev_token))
        assert res.status_code == 200
        assert res.json()["comment"] == "Released"

        res = await client.delete(f"{url}/{change['id']}", headers=auth_header(pm_token))
        assert res.status_code == 204

    async def test_delete_keeps_task_status(self, client, dev_token, task, statuses):
        """이력 삭제는 작업 상태를 되돌리지 않음."""
        url = f"{TASKS}/{task['id']}/status-changes"
        change = (await client.post(url, json={"new_status_id": statuses["done"]}, headers=auth_header(dev_token))).json()
        await client.delete(f"{url}/{change['id']}", headers=auth_header(dev_token))
        detail = (await client.get(f"{TASKS}/{task['id']}", headers=auth_header(dev_token))).json()
        assert detail["status_id"] == statuses["done"]

"""작업 배정 및 알림 API 테스트.

Task assignment and notification API tests — Manager-only assignment,
notification fan-out on assignment, comments and status changes, and the
read/unread workflow.
"""

import pytest_asyncio

from tests.conftest import API, auth_header

TASKS = f"{API}/tasks"
NOTIFICATIONS = f"{API}/notifications"


@pytest_asyncio.fixture
async def task(client, dev_token) -> dict:
    res = await client.post(TASKS, json={"title": "Review PR"}, headers=auth_header(dev_token))
    return res.json()


async def _assign(client, token: str, task_id: str, user_id) -> object:
    return await client.post(
        f"{TASKS}/{task_id}/assignments", json={"assignee_id": str(user_id)}, headers=auth_header(token)
    )


class TestAssignments:
    """작업 배정 테스트."""

    async def test_manager_assigns(self, client, pm_token, qa_user, task):
        res = await _assign(client, pm_token, task["id"], qa_user.id)
        assert res.status_code == 201
        data = res.json()
        assert data["assignee_id"] == str(qa_user.id)
        assert data["assignee_name"] == "Quinn Qa"

        detail = (await client.get(f"{TASKS}/{task['id']}", headers=auth_header(pm_token))).json()
        assert detail["assignee_ids"] == [str(qa_user.id)]

    async def test_developer_cannot_assign(self, client, dev_token, qa_user, task):
        res = await _assign(client, dev_token, task["id"], qa_user.id)
        assert res.status_code == 403

    async def test_duplicate_assignment(self, client, pm_token, qa_user, task):
        await _assign(client, pm_token, task["id"], qa_user.id)
        res = await _assign(client, pm_token, task["id"], qa_user.id)
        assert res.status_code == 409

    async def test_foreign_assignee(self, client, pm_token, other_user, task):
        res = await _assign(client, pm_token, task["id"], other_user.id)
        assert res.status_code == 404

    async def test_unassign_and_reassign(self, client, pm_token, dev_token, qa_user, task):
        assignment = (await _assign(client, pm_token, task["id"], qa_user.id)).json()
        url = f"{TASKS}/{task['id']}/assignments/{assignment['id']}"

        res = await client.delete(url, headers=auth_header(dev_token))
        assert res.status_code == 403
        res = await client.delete(url, headers=auth_header(pm_token))
        assert res.status_code == 204

        detail = (await client.get(f"{TASKS}/{task['id']}", headers=auth_header(pm_token))).json()
        assert detail["assignee_ids"] == []
        res = await _assign(client, pm_token, task["id"], qa_user.id)
        assert res.status_code == 201

    async def test_list_assignments(self, client, pm_token, dev_token, qa_user, dev_user, task):
        await _assign(client, pm_token, task["id"], qa_user.id)
        await _assign(client, pm_token, task["id"], dev_user.id)
        res = await client.get(f"{TASKS}/{task['id']}/assignments", headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 2


class TestNotifications:
    """알림 테스트."""

    async def test_assignment_notifies_assignee(self, client, pm_token, qa_token, qa_user, task):
        await _assign(client, pm_token, task["id"], qa_user.id)
        res = await client.get(NOTIFICATIONS, headers=auth_header(qa_token))
        data = res.json()["data"]
        assert len(data) == 1
        assert data[0]["type"] == "task_assigned"
        assert data[0]["reference_type"] == "task"
        assert data[0]["reference_id"] == task["id"]
        assert data[0]["is_read"] is False

    async def test_comment_notifies_creator_and_assignees(self, client, pm_token, dev_token, qa_token, qa_user, task):
        await _assign(client, pm_token, task["id"], qa_user.id)
        await client.post(f"{TASKS}/{task['id']}/comments", json={"comment_body": "Ping"}, headers=auth_header(pm_token))

        creator = (await client.get(NOTIFICATIONS, params={"is_read": False}, headers=auth_header(dev_token))).json()
        assert [n["type"] for n in creator["data"]] == ["task_commented"]
        assignee = (await client.get(NOTIFICATIONS, headers=auth_header(qa_token))).json()
        assert {n["type"] for n in assignee["data"]} == {"task_assigned", "task_commented"}
        author = (await client.get(NOTIFICATIONS, headers=auth_header(pm_token))).json()
        assert author["pagination"]["records"] == 0

    async def test_author_not_notified_of_own_comment(self, client, dev_token, task):
        await client.post(f"{TASKS}/{task['id']}/comments", json={"comment_body": "Self note"}, headers=auth_header(dev_token))
        res = await client.get(NOTIFICATIONS, headers=auth_header(dev_token))
        assert res.json()["pagination"]["records"] == 0

    async def test_status_change_notifies_creator(self, client, qa_token, dev_token, statuses, task):
        await client.post(
            f"{TASKS}/{task['id']}/status-changes", json={"new_status_id": statuses["done"]}, headers=auth_header(qa_token)
        )
        data = (await client.get(NOTIFICATIONS, headers=auth_header(dev_token))).json()["data"]
        assert [n["type"] for n in data] == ["task_status_changed"]

    async def test_mark_read_and_unread(self, client, pm_token, qa_token, qa_user, task):
        await _assign(client, pm_token, task["id"], qa_user.id)
        notification = (await client.get(NOTIFICATIONS, headers=auth_header(qa_token))).json()["data"][0]
        url = f"{NOTIFICATIONS}/{notification['id']}"

        res = await client.put(url, json={"is_read": True}, headers=auth_header(qa_token))
        assert res.status_code == 200
        assert res.json()["is_read"] is True
        assert res.json()["read_at"] is not None

        res = await client.put(url, json={"is_read": False}, headers=auth_header(qa_token))
        assert res.json()["is_read"] is False
        assert res.json()["read_at"] is None

    async def test_read_all(self, client, pm_token, qa_token, qa_user, dev_token):
        for title in ("One", "Two"):
            created = (await client.post(TASKS, json={"title": title}, headers=auth_header(dev_token))).json()
            await _assign(client, pm_token, created["id"], qa_user.id)

        res = await client.post(f"{NOTIFICATIONS}/read-all", headers=auth_header(qa_token))
        assert res.status_code == 200
        assert res.json()["updated"] == 2
        res = await client.get(NOTIFICATIONS, params={"is_read": False}, headers=auth_header(qa_token))
        assert res.json()["pagination"]["records"] == 0

    async def test_cannot_touch_others_notifications(self, client, pm_token, qa_token, dev_token, qa_user, task):
        await _assign(client, pm_token, task["id"], qa_user.id)
        notification = (await client.get(NOTIFICATIONS, headers=auth_header(qa_token))).json()["data"][0]
        url = f"{NOTIFICATIONS}/{notification['id']}"
        assert (await client.get(url, headers=auth_header(dev_token))).status_code == 404
        assert (await client.delete(url, headers=auth_header(dev_token))).status_code == 404

    async def test_delete(self, client, pm_token, qa_token, qa_user, task):
        await _assign(client, pm_token, task["id"], qa_user.id)
        notification = (await client.get(NOTIFICATIONS, headers=auth_header(qa_token))).json()["data"][0]
        res = await client.delete(f"{NOTIFICATIONS}/{notification['id']}", headers=auth_header(qa_token))
        assert res.status_code == 204
        res = await client.get(NOTIFICATIONS, headers=auth_header(qa_token))
        assert res.json()["pagination"]["records"] == 0

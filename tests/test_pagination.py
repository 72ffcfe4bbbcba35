"""페이지네이션 계약 테스트.

Pagination contract tests — page/limit validation, envelope metadata,
pages past the end and sort fallbacks, checked on the project index.
"""

from taskhub.utils.pagination import total_pages
from tests.conftest import API, auth_header

URL = f"{API}/projects"


async def _create_projects(client, token: str, count: int) -> None:
    for i in range(count):
        res = await client.post(URL, json={"code": f"P{i:02d}", "name": f"Project {i:02d}"}, headers=auth_header(token))
        assert res.status_code == 201


def test_total_pages():
    assert total_pages(0, 20) == 0
    assert total_pages(20, 20) == 1
    assert total_pages(21, 20) == 2


class TestPagination:
    """목록 조회 공통 페이지네이션 테스트."""

    async def test_envelope(self, client, pm_token):
        await _create_projects(client, pm_token, 5)
        res = await client.get(URL, params={"limit": 2}, headers=auth_header(pm_token))
        assert res.status_code == 200
        body = res.json()
        assert body["pagination"] == {"current": 1, "limit": 2, "records": 5, "pages": 3}
        assert len(body["data"]) == 2

    async def test_last_page_is_partial(self, client, pm_token):
        await _create_projects(client, pm_token, 5)
        res = await client.get(URL, params={"limit": 2, "page": 3}, headers=auth_header(pm_token))
        assert len(res.json()["data"]) == 1

    async def test_page_past_end_is_empty(self, client, pm_token):
        await _create_projects(client, pm_token, 3)
        res = await client.get(URL, params={"limit": 2, "page": 9}, headers=auth_header(pm_token))
        body = res.json()
        assert body["data"] == []
        assert body["pagination"]["records"] == 3
        assert body["pagination"]["current"] == 9

    async def test_page_zero_is_first_page(self, client, pm_token):
        await _create_projects(client, pm_token, 3)
        res = await client.get(URL, params={"page": 0}, headers=auth_header(pm_token))
        assert res.status_code == 200
        assert res.json()["pagination"]["current"] == 1

    async def test_invalid_limit(self, client, pm_token):
        for limit in (0, -1, 101):
            res = await client.get(URL, params={"limit": limit}, headers=auth_header(pm_token))
            assert res.status_code == 422

    async def test_negative_page(self, client, pm_token):
        res = await client.get(URL, params={"page": -1}, headers=auth_header(pm_token))
        assert res.status_code == 422

    async def test_invalid_sort_direction(self, client, pm_token):
        res = await client.get(URL, params={"sort_direction": "sideways"}, headers=auth_header(pm_token))
        assert res.status_code == 422

    async def test_sort_by_code(self, client, pm_token):
        await _create_projects(client, pm_token, 3)
        res = await client.get(URL, params={"sort_by": "code", "sort_direction": "asc"}, headers=auth_header(pm_token))
        assert [p["code"] for p in res.json()["data"]] == ["P00", "P01", "P02"]
        res = await client.get(URL, params={"sort_by": "code", "sort_direction": "desc"}, headers=auth_header(pm_token))
        assert [p["code"] for p in res.json()["data"]] == ["P02", "P01", "P00"]

    async def test_unknown_sort_field_falls_back(self, client, pm_token):
        await _create_projects(client, pm_token, 3)
        res = await client.get(URL, params={"sort_by": "password_hash"}, headers=auth_header(pm_token))
        assert res.status_code == 200
        assert res.json()["pagination"]["records"] == 3

    async def test_pages_do_not_overlap(self, client, pm_token):
        await _create_projects(client, pm_token, 5)
        seen: list[str] = []
        for page in (1, 2, 3):
            res = await client.get(URL, params={"limit": 2, "page": page}, headers=auth_header(pm_token))
            seen.extend(p["id"] for p in res.json()["data"])
        assert len(seen) == len(set(seen)) == 5

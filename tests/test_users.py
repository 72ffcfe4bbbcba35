"""사용자 관리 API 테스트.

User API tests — Listing with filters, creation by managers, self/pmo
updates, pmo-only deletion and tenant isolation.
"""

from taskhub.models.user import UserRole
from tests.conftest import API, AUTH, auth_header, make_token, make_user

URL = f"{API}/users"


class TestUserRead:
    """사용자 조회 테스트."""

    async def test_list_users_scoped_to_tenant(self, client, dev_token, pmo_user, pm_user, dev_user, other_user):
        res = await client.get(URL, headers=auth_header(dev_token))
        assert res.status_code == 200
        data = res.json()
        assert data["pagination"]["records"] == 3
        emails = {u["email"] for u in data["data"]}
        assert "boss@other.com" not in emails

    async def test_filter_by_role(self, client, dev_token, pmo_user, pm_user, dev_user):
        res = await client.get(URL, params={"role": "pm"}, headers=auth_header(dev_token))
        data = res.json()
        assert [u["email"] for u in data["data"]] == ["pm@test.com"]

    async def test_search_name_or_email(self, client, dev_token, pmo_user, pm_user, dev_user):
        res = await client.get(URL, params={"search": "DANA"}, headers=auth_header(dev_token))
        assert [u["name"] for u in res.json()["data"]] == ["Dana Dev"]

    async def test_sort_by_name(self, client, dev_token, pmo_user, pm_user, dev_user):
        res = await client.get(URL, params={"sort_by": "name", "sort_direction": "asc"}, headers=auth_header(dev_token))
        names = [u["name"] for u in res.json()["data"]]
        assert names == sorted(names)

    async def test_get_user(self, client, dev_token, pm_user):
        res = await client.get(f"{URL}/{pm_user.id}", headers=auth_header(dev_token))
        assert res.status_code == 200
        assert res.json()["role"] == "pm"

    async def test_get_other_tenant_user(self, client, dev_token, other_user):
        """다른 테넌트 사용자는 404."""
        res = await client.get(f"{URL}/{other_user.id}", headers=auth_header(dev_token))
        assert res.status_code == 404


class TestUserCreate:
    """사용자 생성 테스트."""

    async def test_manager_creates_user(self, client, pm_token):
        res = await client.post(URL, json={
            "email": "New.Designer@Test.com",
            "password": "designer-pass",
            "name": "New Designer",
            "role": "designer",
        }, headers=auth_header(pm_token))
        assert res.status_code == 201
        assert res.json()["email"] == "new.designer@test.com"

        login = await client.post(f"{AUTH}/designer/login", json={
            "email": "new.designer@test.com", "password": "designer-pass",
        })
        assert login.status_code == 200

    async def test_developer_cannot_create_user(self, client, dev_token):
        res = await client.post(URL, json={
            "email": "x@test.com", "password": "whatever1", "name": "X", "role": "qa",
        }, headers=auth_header(dev_token))
        assert res.status_code == 403

    async def test_tpm_cannot_create_pmo(self, client, db, org):
        """pmo 계정은 pmo만 생성 가능."""
        tpm_user = await make_user(db, org, UserRole.TPM, "tpm@test.com", "Terry Tpm")
        res = await client.post(URL, json={
            "email": "shadow@test.com", "password": "shadow-pass", "name": "Shadow", "role": "pmo",
        }, headers=auth_header(make_token(tpm_user)))
        assert res.status_code == 403

        login = await client.post(f"{AUTH}/pmo/login", json={"email": "shadow@test.com", "password": "shadow-pass"})
        assert login.status_code == 401

    async def test_pm_cannot_create_pmo(self, client, pm_token):
        res = await client.post(URL, json={
            "email": "shadow@test.com", "password": "shadow-pass", "name": "Shadow", "role": "pmo",
        }, headers=auth_header(pm_token))
        assert res.status_code == 403

    async def test_pmo_creates_pmo(self, client, pmo_token):
        res = await client.post(URL, json={
            "email": "deputy@test.com", "password": "deputy-pass", "name": "Deputy", "role": "pmo",
        }, headers=auth_header(pmo_token))
        assert res.status_code == 201
        assert res.json()["role"] == "pmo"

    async def test_duplicate_email(self, client, pm_token, dev_user):
        res = await client.post(URL, json={
            "email": "dev@test.com", "password": "whatever1", "name": "Dup", "role": "qa",
        }, headers=auth_header(pm_token))
        assert res.status_code == 409

    async def test_deleted_users_email_stays_taken(self, client, pmo_token, dev_user):
        await client.delete(f"{URL}/{dev_user.id}", headers=auth_header(pmo_token))
        res = await client.post(URL, json={
            "email": "dev@test.com", "password": "whatever1", "name": "Again", "role": "qa",
        }, headers=auth_header(pmo_token))
        assert res.status_code == 409


class TestUserUpdate:
    """사용자 수정 테스트."""

    async def test_update_self(self, client, dev_token, dev_user):
        res = await client.put(f"{URL}/{dev_user.id}", json={"name": "Dana D."}, headers=auth_header(dev_token))
        assert res.status_code == 200
        assert res.json()["name"] == "Dana D."

    async def test_update_other_forbidden(self, client, dev_token, qa_user):
        res = await client.put(f"{URL}/{qa_user.id}", json={"name": "Nope"}, headers=auth_header(dev_token))
        assert res.status_code == 403

    async def test_manager_update_other_forbidden(self, client, pm_token, dev_user):
        """pm도 타인 정보 수정 불가 (pmo 전용)."""
        res = await client.put(f"{URL}/{dev_user.id}", json={"name": "Nope"}, headers=auth_header(pm_token))
        assert res.status_code == 403

    async def test_self_role_change_forbidden(self, client, dev_token, dev_user):
        res = await client.put(f"{URL}/{dev_user.id}", json={"role": "pmo"}, headers=auth_header(dev_token))
        assert res.status_code == 403

    async def test_pmo_changes_role(self, client, pmo_token, dev_user):
        res = await client.put(f"{URL}/{dev_user.id}", json={"role": "qa"}, headers=auth_header(pmo_token))
        assert res.status_code == 200
        assert res.json()["role"] == "qa"

    async def test_password_change(self, client, dev_token, dev_user):
        res = await client.put(
            f"{URL}/{dev_user.id}", json={"password": "brand-new-pass"}, headers=auth_header(dev_token)
        )
        assert res.status_code == 200
        login = await client.post(f"{AUTH}/developer/login", json={
            "email": "dev@test.com", "password": "brand-new-pass",
        })
        assert login.status_code == 200


class TestUserDelete:
    """사용자 삭제 테스트."""

    async def test_pmo_deletes_user(self, client, pmo_token, dev_user):
        res = await client.delete(f"{URL}/{dev_user.id}", headers=auth_header(pmo_token))
        assert res.status_code == 204
        res = await client.get(f"{URL}/{dev_user.id}", headers=auth_header(pmo_token))
        assert res.status_code == 404

    async def test_pm_cannot_delete(self, client, pm_token, dev_user):
        res = await client.delete(f"{URL}/{dev_user.id}", headers=auth_header(pm_token))
        assert res.status_code == 403

    async def test_cannot_delete_self(self, client, pmo_token, pmo_user):
        res = await client.delete(f"{URL}/{pmo_user.id}", headers=auth_header(pmo_token))
        assert res.status_code == 400

    async def test_deleted_user_token_rejected(self, client, pmo_token, dev_token, dev_user):
        await client.delete(f"{URL}/{dev_user.id}", headers=auth_header(pmo_token))
        res = await client.get(URL, headers=auth_header(dev_token))
        assert res.status_code == 401

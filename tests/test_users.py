"""Admin-only user management endpoints."""

from httpx import AsyncClient
from ulid import ULID

from .helpers import API


class TestAdminGate:
    async def test_non_admin_forbidden(self, client: AsyncClient, alice, bob):
        for method, url in (
            ("GET", f"{API}/users"),
            ("PATCH", f"{API}/users/{bob.id}/toggle-status"),
        ):
            resp = await client.request(method, url, headers=alice.headers)
            assert resp.status_code == 403
            assert resp.json()["message"] == "Access denied. Admin privileges required."

    async def test_anonymous_unauthorized(self, client: AsyncClient):
        resp = await client.get(f"{API}/users")
        assert resp.status_code == 401


class TestListUsers:
    async def test_list_and_filter(self, client: AsyncClient, admin, alice, bob):
        resp = await client.get(f"{API}/users", headers=admin.headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["pagination"]["total"] == 3
        assert data["users"][0]["username"] == "bob"
        assert all("passwordHash" not in u for u in data["users"])

        resp = await client.get(
            f"{API}/users", params={"role": "admin"}, headers=admin.headers
        )
        users = resp.json()["data"]["users"]
        assert [u["id"] for u in users] == [admin.id]

    async def test_pagination(self, client: AsyncClient, admin, alice, bob):
        resp = await client.get(
            f"{API}/users", params={"page": 2, "limit": 2}, headers=admin.headers
        )
        data = resp.json()["data"]
        assert len(data["users"]) == 1
        assert data["pagination"] == {"current": 2, "pages": 2, "total": 3, "limit": 2}

    async def test_invalid_role_filter(self, client: AsyncClient, admin):
        resp = await client.get(
            f"{API}/users", params={"role": "root"}, headers=admin.headers
        )
        assert resp.status_code == 400


class TestToggleStatus:
    async def test_toggle_twice(self, client: AsyncClient, admin, alice):
        url = f"{API}/users/{alice.id}/toggle-status"

        resp = await client.patch(url, headers=admin.headers)
        assert resp.status_code == 200
        assert resp.json()["message"] == "User deactivated successfully"
        assert resp.json()["data"]["isActive"] is False

        resp = await client.get(f"{API}/auth/me", headers=alice.headers)
        assert resp.status_code == 401

        resp = await client.patch(url, headers=admin.headers)
        assert resp.json()["message"] == "User activated successfully"
        assert resp.json()["data"]["isActive"] is True

    async def test_cannot_target_self(self, client: AsyncClient, admin):
        resp = await client.patch(
            f"{API}/users/{admin.id}/toggle-status", headers=admin.headers
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "You cannot deactivate your own account"

    async def test_unknown_user(self, client: AsyncClient, admin):
        resp = await client.patch(
            f"{API}/users/{ULID()}/toggle-status", headers=admin.headers
        )
        assert resp.status_code == 404
        assert resp.json()["message"] == "User not found"

    async def test_malformed_id(self, client: AsyncClient, admin):
        resp = await client.patch(f"{API}/users/abc/toggle-status", headers=admin.headers)
        assert resp.status_code == 400


class TestChangeRole:
    async def test_promote_grants_admin_access(self, client: AsyncClient, admin, alice, bob):
        resp = await client.patch(
            f"{API}/users/{alice.id}/role", json={"role": "admin"}, headers=admin.headers
        )
        assert resp.status_code == 200
        assert resp.json()["message"] == "User role updated successfully"
        assert resp.json()["data"]["role"] == "admin"

        resp = await client.get(f"{API}/users", headers=alice.headers)
        assert resp.status_code == 200

    async def test_cannot_change_own_role(self, client: AsyncClient, admin):
        resp = await client.patch(
            f"{API}/users/{admin.id}/role", json={"role": "user"}, headers=admin.headers
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "You cannot change your own role"

    async def test_invalid_role(self, client: AsyncClient, admin, alice):
        resp = await client.patch(
            f"{API}/users/{alice.id}/role", json={"role": "owner"}, headers=admin.headers
        )
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "role"

    async def test_unknown_user(self, client: AsyncClient, admin):
        resp = await client.patch(
            f"{API}/users/{ULID()}/role", json={"role": "admin"}, headers=admin.headers
        )
        assert resp.status_code == 404

"""Shared request helpers for API tests."""

from types import SimpleNamespace

from httpx import AsyncClient

API = "/api/v1"
PASSWORD = "Passw0rd"


async def register(client: AsyncClient, username: str) -> SimpleNamespace:
    """Register an account and return its user record, token and auth headers."""
    resp = await client.post(
        f"{API}/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": PASSWORD,
        },
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    return SimpleNamespace(
        id=data["user"]["id"],
        user=data["user"],
        token=data["token"],
        headers={"Authorization": f"Bearer {data['token']}"},
    )


async def create_task(client: AsyncClient, owner: SimpleNamespace, **fields) -> dict:
    payload = {"title": "Write report", "description": "Quarterly numbers"}
    payload.update(fields)
    resp = await client.post(f"{API}/tasks", json=payload, headers=owner.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]

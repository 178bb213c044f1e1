"""
Tests for user and profile endpoints.
"""

import pytest
from httpx import AsyncClient


async def create_user(client: AsyncClient, headers: dict, **overrides) -> dict:
    body = {"username": "alice", "email": "alice@example.com", "role": "user", **overrides}
    response = await client.post("/api/users", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_and_list_users(client: AsyncClient, admin_headers: dict):
    created = await create_user(client, admin_headers, nickname="Alice")

    assert created["role"] == "user"
    assert created["status"] == 1

    response = await client.get("/api/users", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["users"][0]["username"] == "alice"


@pytest.mark.asyncio
async def test_search_users(client: AsyncClient, admin_headers: dict):
    await create_user(client, admin_headers)
    await create_user(client, admin_headers, username="bob", email="bob@example.com", nickname="Bobby")

    response = await client.get("/api/users", params={"search": "bob"}, headers=admin_headers)

    assert [u["username"] for u in response.json()["users"]] == ["bob"]


@pytest.mark.asyncio
async def test_create_user_with_unknown_role(client: AsyncClient, admin_headers: dict):
    response = await client.post(
        "/api/users",
        headers=admin_headers,
        json={"username": "carol", "email": "carol@example.com", "role": "wizard"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "validation_failed"


@pytest.mark.asyncio
async def test_create_duplicate_user(client: AsyncClient, admin_headers: dict):
    await create_user(client, admin_headers)

    response = await client.post(
        "/api/users",
        headers=admin_headers,
        json={"username": "alice", "email": "other@example.com"},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_user_rejects_bad_email(client: AsyncClient, admin_headers: dict):
    response = await client.post(
        "/api/users",
        headers=admin_headers,
        json={"username": "dave", "email": "not-an-email"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_user_not_found(client: AsyncClient, admin_headers: dict):
    response = await client.get("/api/users/999", headers=admin_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_user_role(client: AsyncClient, admin_headers: dict):
    user = await create_user(client, admin_headers)

    response = await client.put(f"/api/users/{user['id']}", headers=admin_headers, json={"role": "guest"})

    assert response.status_code == 200
    assert response.json()["role"] == "guest"


@pytest.mark.asyncio
async def test_update_user_status(client: AsyncClient, admin_headers: dict):
    user = await create_user(client, admin_headers)

    response = await client.put(f"/api/users/{user['id']}/status", headers=admin_headers, json={"status": 0})

    assert response.status_code == 200
    assert response.json()["status"] == 0


@pytest.mark.asyncio
async def test_delete_user(client: AsyncClient, admin_headers: dict):
    user = await create_user(client, admin_headers)

    response = await client.delete(f"/api/users/{user['id']}", headers=admin_headers)

    assert response.status_code == 204
    assert (await client.get(f"/api/users/{user['id']}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_user_role_can_read_but_not_write(client: AsyncClient, admin_headers: dict, user_headers: dict):
    user = await create_user(client, admin_headers)

    assert (await client.get("/api/users", headers=user_headers)).status_code == 200
    assert (await client.get(f"/api/users/{user['id']}", headers=user_headers)).status_code == 200
    assert (await client.put(
        f"/api/users/{user['id']}",
        headers=user_headers,
        json={"role": "admin"},
    )).status_code == 403
    assert (await client.delete(f"/api/users/{user['id']}", headers=user_headers)).status_code == 403


@pytest.mark.asyncio
async def test_guest_cannot_list_users(client: AsyncClient, guest_headers: dict):
    response = await client.get("/api/users", headers=guest_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_role_with_users_cannot_be_deleted(client: AsyncClient, admin_headers: dict):
    role = (await client.post(
        "/api/roles",
        headers=admin_headers,
        json={"name": "ops", "display_name": "Ops"},
    )).json()
    await create_user(client, admin_headers, role="ops")

    response = await client.delete(f"/api/roles/{role['id']}", headers=admin_headers)

    assert response.status_code == 409


# ============ Profile ============


@pytest.mark.asyncio
async def test_get_own_profile(client: AsyncClient, admin_headers: dict, user_headers: dict):
    await create_user(client, admin_headers)

    response = await client.get("/api/auth/profile", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["username"] == "alice"


@pytest.mark.asyncio
async def test_update_own_profile(client: AsyncClient, admin_headers: dict, user_headers: dict):
    await create_user(client, admin_headers)

    response = await client.put("/api/auth/profile", headers=user_headers, json={"nickname": "Al"})

    assert response.status_code == 200
    assert response.json()["nickname"] == "Al"
    assert response.json()["role"] == "user"


@pytest.mark.asyncio
async def test_profile_without_account(client: AsyncClient, guest_headers: dict):
    response = await client.get("/api/auth/profile", headers=guest_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_guest_cannot_update_profile(client: AsyncClient, guest_headers: dict):
    response = await client.put("/api/auth/profile", headers=guest_headers, json={"nickname": "x"})

    assert response.status_code == 403

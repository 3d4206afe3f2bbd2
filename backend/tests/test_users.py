"""
User registration and role lookup tests.
"""

import pytest
from sqlalchemy import select

from backend.app.models.user import User
from backend.app.models.enums import UserRole


@pytest.mark.asyncio
async def test_register_new_user(client):
    response = await client.post("/users", json={
        "email": "Dana@Example.com",
        "name": "Dana",
        "photo_url": "https://img.example.com/dana.png",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["inserted"] is True
    assert data["user"]["email"] == "dana@example.com"
    assert data["user"]["role"] == "user"


@pytest.mark.asyncio
async def test_register_existing_user_refreshes_login(client, session_factory):
    first = await client.post("/users", json={"email": "dana@example.com", "name": "Dana"})
    second = await client.post("/users", json={"email": "dana@example.com", "name": "Other"})

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["message"] == "User already exists"
    assert second.json()["inserted"] is False
    assert second.json()["user"]["name"] == "Dana"

    async with session_factory() as session:
        users = (await session.execute(select(User))).scalars().all()
        assert len(users) == 1


@pytest.mark.asyncio
async def test_register_cannot_choose_role(client):
    response = await client.post("/users", json={"email": "eve@example.com", "role": "admin"})

    assert response.status_code == 201
    assert response.json()["user"]["role"] == "user"


@pytest.mark.asyncio
async def test_register_rejects_bad_email(client):
    response = await client.post("/users", json={"email": "not-an-email"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_own_role(client, alice_headers):
    await client.post("/users", json={"email": "alice@example.com"})

    response = await client.get("/users/alice@example.com/role", headers=alice_headers)

    assert response.status_code == 200
    assert response.json() == {"role": "user"}


@pytest.mark.asyncio
async def test_role_of_other_user(client, alice_headers, bob_headers, admin_headers):
    await client.post("/users", json={"email": "alice@example.com"})

    as_bob = await client.get("/users/alice@example.com/role", headers=bob_headers)
    as_admin = await client.get("/users/alice@example.com/role", headers=admin_headers)
    admin_self = await client.get("/users/admin@example.com/role", headers=admin_headers)

    assert as_bob.status_code == 403
    assert as_admin.status_code == 200
    assert admin_self.json() == {"role": UserRole.ADMIN.value}


@pytest.mark.asyncio
async def test_role_of_unknown_user(client, alice_headers):
    response = await client.get("/users/alice@example.com/role", headers=alice_headers)

    assert response.status_code == 404

"""User management API tests — ADMIN-gated, tenant-scoped."""

import uuid

import pytest

from conftest import PASSWORD


@pytest.mark.asyncio
async def test_admin_adds_member(client, register):
    admin = await register()
    r = await client.post(
        "/api/v1/users",
        json={
            "email": "new@acme.io",
            "password": PASSWORD,
            "firstName": "New",
            "lastName": "Person",
        },
        headers=admin["headers"],
    )
    assert r.status_code == 201
    data = r.json()
    assert data["role"] == "MEMBER"
    assert data["tenantId"] == admin["tenantId"]


@pytest.mark.asyncio
async def test_added_user_can_log_in_to_same_tenant(register, add_user):
    admin = await register()
    manager = await add_user(admin, role="MANAGER")
    assert manager["role"] == "MANAGER"
    assert manager["tenantId"] == admin["tenantId"]


@pytest.mark.asyncio
async def test_add_user_duplicate_email(client, register):
    admin = await register(email="taken@acme.io")
    r = await client.post(
        "/api/v1/users",
        json={
            "email": "taken@acme.io",
            "password": PASSWORD,
            "firstName": "Dup",
            "lastName": "User",
        },
        headers=admin["headers"],
    )
    assert r.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["MANAGER", "MEMBER"])
async def test_non_admin_cannot_add_users(client, register, add_user, role):
    admin = await register()
    caller = await add_user(admin, role=role)
    r = await client.post(
        "/api/v1/users",
        json={
            "email": "x@acme.io",
            "password": PASSWORD,
            "firstName": "X",
            "lastName": "Y",
        },
        headers=caller["headers"],
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_list_users_only_own_tenant(client, register, add_user):
    admin_a = await register(org="A")
    await add_user(admin_a)
    admin_b = await register(org="B")

    r = await client.get("/api/v1/users", headers=admin_a["headers"])
    assert r.status_code == 200
    users = r.json()
    assert len(users) == 2
    assert {u["tenantId"] for u in users} == {admin_a["tenantId"]}
    assert admin_b["userId"] not in {u["id"] for u in users}


@pytest.mark.asyncio
async def test_role_change_applies_at_next_login(client, register, add_user):
    admin = await register()
    member = await add_user(admin, role="MEMBER")

    r = await client.put(
        f"/api/v1/users/{member['userId']}/role",
        json={"role": "MANAGER"},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    assert r.json()["role"] == "MANAGER"

    # The old token still carries MEMBER.
    project = await client.post(
        "/api/v1/projects", json={"name": "P"}, headers=admin["headers"]
    )
    r = await client.delete(
        f"/api/v1/projects/{project.json()['id']}", headers=member["headers"]
    )
    assert r.status_code == 403

    r = await client.post(
        "/api/v1/auth/login", json={"email": member["email"], "password": PASSWORD}
    )
    assert r.json()["role"] == "MANAGER"


@pytest.mark.asyncio
async def test_last_admin_cannot_be_demoted(client, register):
    admin = await register()
    r = await client.put(
        f"/api/v1/users/{admin['userId']}/role",
        json={"role": "MEMBER"},
        headers=admin["headers"],
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_admin_can_be_demoted_when_another_remains(client, register, add_user):
    admin = await register()
    second = await add_user(admin, role="ADMIN")
    r = await client.put(
        f"/api/v1/users/{second['userId']}/role",
        json={"role": "MEMBER"},
        headers=admin["headers"],
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_manager_cannot_change_roles(client, register, add_user):
    admin = await register()
    manager = await add_user(admin, role="MANAGER")
    member = await add_user(admin, role="MEMBER")
    r = await client.put(
        f"/api/v1/users/{member['userId']}/role",
        json={"role": "ADMIN"},
        headers=manager["headers"],
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_role_change_on_foreign_user_is_not_found(client, register):
    admin_a = await register(org="A")
    admin_b = await register(org="B")
    foreign = await client.put(
        f"/api/v1/users/{admin_b['userId']}/role",
        json={"role": "MEMBER"},
        headers=admin_a["headers"],
    )
    missing = await client.put(
        f"/api/v1/users/{uuid.uuid4()}/role",
        json={"role": "MEMBER"},
        headers=admin_a["headers"],
    )
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()


@pytest.mark.asyncio
async def test_invalid_role_rejected(client, register, add_user):
    admin = await register()
    member = await add_user(admin)
    r = await client.put(
        f"/api/v1/users/{member['userId']}/role",
        json={"role": "OWNER"},
        headers=admin["headers"],
    )
    assert r.status_code == 422

"""Project API tests — CRUD inside one organization."""

import uuid

import pytest


@pytest.mark.asyncio
async def test_create_and_get_project(client, register):
    admin = await register()
    r = await client.post(
        "/api/v1/projects",
        json={"name": "Website", "description": "Relaunch"},
        headers=admin["headers"],
    )
    assert r.status_code == 201
    project = r.json()
    assert project["name"] == "Website"
    assert project["createdBy"] == admin["userId"]
    assert "tenantId" not in project

    r = await client.get(f"/api/v1/projects/{project['id']}", headers=admin["headers"])
    assert r.status_code == 200
    assert r.json()["description"] == "Relaunch"


@pytest.mark.asyncio
async def test_any_role_can_create_and_update(client, register, add_user):
    admin = await register()
    member = await add_user(admin)

    r = await client.post(
        "/api/v1/projects", json={"name": "Mine"}, headers=member["headers"]
    )
    assert r.status_code == 201

    r = await client.put(
        f"/api/v1/projects/{r.json()['id']}",
        json={"description": "Updated"},
        headers=member["headers"],
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Mine"
    assert r.json()["description"] == "Updated"


@pytest.mark.asyncio
async def test_list_projects_newest_first(client, register):
    admin = await register()
    for name in ("first", "second", "third"):
        await client.post("/api/v1/projects", json={"name": name}, headers=admin["headers"])

    r = await client.get("/api/v1/projects", headers=admin["headers"])
    assert [p["name"] for p in r.json()] == ["third", "second", "first"]


@pytest.mark.asyncio
async def test_project_validation(client, register):
    admin = await register()
    r = await client.post("/api/v1/projects", json={"name": ""}, headers=admin["headers"])
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_unknown_project_not_found(client, register):
    admin = await register()
    r = await client.get(f"/api/v1/projects/{uuid.uuid4()}", headers=admin["headers"])
    assert r.status_code == 404
    assert r.json()["detail"] == "Project not found"


@pytest.mark.asyncio
async def test_member_cannot_delete_project(client, register, add_user):
    admin = await register()
    member = await add_user(admin)
    project = await client.post(
        "/api/v1/projects", json={"name": "P"}, headers=member["headers"]
    )

    r = await client.delete(
        f"/api/v1/projects/{project.json()['id']}", headers=member["headers"]
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_manager_deletes_project_with_its_tasks(client, register, add_user):
    admin = await register()
    manager = await add_user(admin, role="MANAGER")
    project = (
        await client.post("/api/v1/projects", json={"name": "P"}, headers=admin["headers"])
    ).json()
    task = (
        await client.post(
            "/api/v1/tasks",
            json={"projectId": project["id"], "title": "T"},
            headers=admin["headers"],
        )
    ).json()
    await client.post(
        f"/api/v1/tasks/{task['id']}/comments",
        json={"content": "note"},
        headers=admin["headers"],
    )

    r = await client.delete(f"/api/v1/projects/{project['id']}", headers=manager["headers"])
    assert r.status_code == 204

    r = await client.get(f"/api/v1/projects/{project['id']}", headers=admin["headers"])
    assert r.status_code == 404
    r = await client.get(f"/api/v1/tasks/{task['id']}", headers=admin["headers"])
    assert r.status_code == 404

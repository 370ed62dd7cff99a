"""Comment API tests — newest first, delete by author or ADMIN."""

import uuid

import pytest
import pytest_asyncio


@pytest_asyncio.fixture()
async def board(client, register, add_user):
    admin = await register()
    author = await add_user(admin, role="MEMBER", first_name="Ann")
    bystander = await add_user(admin, role="MEMBER")
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
    return {
        "admin": admin,
        "author": author,
        "bystander": bystander,
        "manager": manager,
        "task": task,
    }


async def _comment(client, board, who="author", content="hello"):
    r = await client.post(
        f"/api/v1/tasks/{board['task']['id']}/comments",
        json={"content": content},
        headers=board[who]["headers"],
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.asyncio
async def test_add_comment_carries_author(client, board):
    comment = await _comment(client, board)
    assert comment["content"] == "hello"
    assert comment["taskId"] == board["task"]["id"]
    assert comment["userId"] == board["author"]["userId"]
    assert comment["userEmail"] == board["author"]["email"]
    assert comment["userName"] == "Ann User"


@pytest.mark.asyncio
async def test_empty_comment_rejected(client, board):
    r = await client.post(
        f"/api/v1/tasks/{board['task']['id']}/comments",
        json={"content": ""},
        headers=board["author"]["headers"],
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_list_newest_first(client, board):
    await _comment(client, board, content="first")
    await _comment(client, board, who="bystander", content="second")

    r = await client.get(
        f"/api/v1/tasks/{board['task']['id']}/comments",
        headers=board["admin"]["headers"],
    )
    assert r.status_code == 200
    assert [c["content"] for c in r.json()] == ["second", "first"]


@pytest.mark.asyncio
async def test_comments_on_unknown_task(client, board):
    r = await client.get(
        f"/api/v1/tasks/{uuid.uuid4()}/comments", headers=board["admin"]["headers"]
    )
    assert r.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "who, expected",
    [("author", 204), ("admin", 204), ("bystander", 403), ("manager", 403)],
)
async def test_delete_comment_rule(client, board, who, expected):
    """Only the author or an ADMIN may delete a comment."""
    comment = await _comment(client, board)
    r = await client.delete(
        f"/api/v1/tasks/{board['task']['id']}/comments/{comment['id']}",
        headers=board[who]["headers"],
    )
    assert r.status_code == expected


@pytest.mark.asyncio
async def test_delete_comment_through_wrong_task(client, board):
    comment = await _comment(client, board)
    r = await client.delete(
        f"/api/v1/tasks/{uuid.uuid4()}/comments/{comment['id']}",
        headers=board["admin"]["headers"],
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_deleted_comment_is_gone(client, board):
    comment = await _comment(client, board)
    await client.delete(
        f"/api/v1/tasks/{board['task']['id']}/comments/{comment['id']}",
        headers=board["author"]["headers"],
    )
    r = await client.get(
        f"/api/v1/tasks/{board['task']['id']}/comments",
        headers=board["author"]["headers"],
    )
    assert r.json() == []

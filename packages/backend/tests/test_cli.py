"""CLI tests — commands run against a mocked HTTP transport."""

import httpx
import pytest
from click.testing import CliRunner

from taskhub.cli import main as cli


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture()
def api(monkeypatch):
    """Route the CLI's HTTP client to an in-process handler."""
    seen = []
    routes = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        status, body = routes[(request.method, request.url.path)]
        return httpx.Response(status, json=body)

    def fake_client(token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return httpx.AsyncClient(
            base_url="http://test",
            headers=headers,
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(cli, "_client", fake_client)
    return routes, seen


def test_gen_secret(runner):
    result = runner.invoke(cli.main, ["gen-secret"])
    assert result.exit_code == 0
    assert len(result.output.strip()) >= 32


def test_gen_secret_refuses_small_sizes(runner):
    result = runner.invoke(cli.main, ["gen-secret", "--bytes", "8"])
    assert result.exit_code != 0


def test_login_prints_token(runner, api):
    routes, seen = api
    routes[("POST", "/api/v1/auth/login")] = (200, {"token": "tok-123"})

    result = runner.invoke(cli.main, ["login", "a@x.com", "--password", "pw"])

    assert result.exit_code == 0
    assert result.output.strip() == "tok-123"
    assert b'"email":"a@x.com"' in seen[0].content.replace(b" ", b"")


def test_login_failure_shows_detail(runner, api):
    routes, _ = api
    routes[("POST", "/api/v1/auth/login")] = (401, {"detail": "Invalid email or password"})

    result = runner.invoke(cli.main, ["login", "a@x.com", "--password", "bad"])

    assert result.exit_code == 1
    assert "Error 401: Invalid email or password" in result.output


def test_register(runner, api):
    routes, seen = api
    routes[("POST", "/api/v1/auth/register")] = (
        201,
        {"email": "a@x.com", "role": "ADMIN", "tenantId": "t-1", "token": "tok"},
    )

    result = runner.invoke(
        cli.main,
        [
            "register", "a@x.com",
            "--first-name", "A", "--last-name", "B", "--org", "Acme",
            "--password", "password_123",
        ],
    )

    assert result.exit_code == 0
    assert "Registered a@x.com as ADMIN" in result.output
    assert seen[0].url.path == "/api/v1/auth/register"


def test_whoami_needs_token(runner, monkeypatch):
    monkeypatch.delenv("TASKHUB_TOKEN", raising=False)
    result = runner.invoke(cli.main, ["whoami"])
    assert result.exit_code == 1


def test_whoami_sends_bearer(runner, api, monkeypatch):
    routes, seen = api
    routes[("GET", "/api/v1/auth/me")] = (200, {"email": "a@x.com", "role": "MEMBER"})
    monkeypatch.setenv("TASKHUB_TOKEN", "tok-env")

    result = runner.invoke(cli.main, ["whoami"])

    assert result.exit_code == 0
    assert '"role": "MEMBER"' in result.output
    assert seen[0].headers["Authorization"] == "Bearer tok-env"


def test_tasks_mine(runner, api):
    routes, _ = api
    routes[("GET", "/api/v1/tasks/my-tasks")] = (
        200,
        [{"id": "0123456789", "status": "TODO", "priority": "HIGH", "title": "Ship it"}],
    )

    result = runner.invoke(cli.main, ["tasks", "--mine", "--token", "t"])

    assert result.exit_code == 0
    assert "Ship it" in result.output
    assert "01234567" in result.output

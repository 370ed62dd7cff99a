"""TaskHub CLI — bootstrap secrets and talk to a running backend.

Usage:
    taskhub gen-secret                                   # Signing secret for TASKHUB_JWT_SECRET
    taskhub register a@x.com --first-name A --last-name B --org "Acme"
    taskhub login a@x.com                                # Prints a bearer token
    taskhub whoami                                       # Uses TASKHUB_TOKEN
    taskhub tasks --mine                                 # Task list

Nothing is stored on disk: export the printed token as TASKHUB_TOKEN.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import secrets
import sys
from typing import Optional

import click
import httpx

from taskhub import __version__
from taskhub.config import MIN_SECRET_BYTES

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("TASKHUB_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the TaskHub backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Offloads to a thread when already inside an event loop (e.g. when
    invoked via Click's CliRunner from an async test).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _token_from_env(token: Optional[str]) -> str:
    tok = token or os.environ.get("TASKHUB_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set TASKHUB_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _check(r: httpx.Response) -> dict | list:
    """Return the JSON body, or print the API's error detail and exit."""
    if r.is_success:
        return r.json()
    try:
        detail = r.json().get("detail", r.text)
    except ValueError:
        detail = r.text
    click.secho(f"Error {r.status_code}: {detail}", fg="red", err=True)
    sys.exit(1)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="taskhub")
def main():
    """TaskHub — multi-tenant task management."""


@main.command("gen-secret")
@click.option("--bytes", "nbytes", default=48, show_default=True,
              help="Random bytes before encoding")
def gen_secret(nbytes: int):
    """Print a random secret suitable for TASKHUB_JWT_SECRET."""
    if nbytes < MIN_SECRET_BYTES:
        raise click.BadParameter(
            f"must be at least {MIN_SECRET_BYTES}", param_hint="--bytes"
        )
    click.echo(secrets.token_urlsafe(nbytes))


@main.command()
@click.argument("email")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--org", "organization_name", required=True, help="Organization name")
@click.password_option()
def register(email: str, first_name: str, last_name: str,
             organization_name: str, password: str):
    """Create an organization and its first ADMIN user."""
    _run(_register_impl(email, password, first_name, last_name, organization_name))


async def _register_impl(email, password, first_name, last_name, organization_name):
    async with _client() as c:
        r = await c.post("/api/v1/auth/register", json={
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
            "organizationName": organization_name,
        })
    data = _check(r)
    click.secho(f"Registered {data['email']} as {data['role']}", fg="green")
    click.echo(f"Organization: {data['tenantId']}")
    click.echo(data["token"])


@main.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Log in and print a bearer token."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/v1/auth/login", json={"email": email, "password": password})
    data = _check(r)
    click.echo(data["token"])


@main.command()
@click.option("--token", help="Bearer token (or set TASKHUB_TOKEN)")
def whoami(token: Optional[str]):
    """Show the user behind a token."""
    _run(_whoami_impl(_token_from_env(token)))


async def _whoami_impl(token: str):
    async with _client(token) as c:
        r = await c.get("/api/v1/auth/me")
    click.echo(_pretty_json(_check(r)))


@main.command()
@click.option("--token", help="Bearer token (or set TASKHUB_TOKEN)")
@click.option("--mine", is_flag=True, help="Only tasks assigned to me")
@click.option("--status", type=click.Choice(["TODO", "IN_PROGRESS", "DONE"]))
def tasks(token: Optional[str], mine: bool, status: Optional[str]):
    """List tasks of your organization."""
    _run(_tasks_impl(_token_from_env(token), mine, status))


async def _tasks_impl(token: str, mine: bool, status: Optional[str]):
    path = "/api/v1/tasks/my-tasks" if mine else "/api/v1/tasks"
    params = {"status": status} if status and not mine else None
    async with _client(token) as c:
        r = await c.get(path, params=params)
    rows = _check(r)

    if not rows:
        click.echo("No tasks found.")
        return
    for t in rows:
        click.echo(f"  {t['id'][:8]}  {t['status']:12s}  {t['priority']:6s}  {t['title']}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()

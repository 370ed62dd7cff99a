"""
Shared helpers for TaskHub examples.

Handles the health check and organization bootstrap (register a new
organization, get its ADMIN token) so each example can focus on its
specific workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"
PASSWORD = "demo-password-123"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  uvicorn taskhub.main:app --reload --port 8000")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print(f"Backend {health['status']} (v{health['version']})")
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")

    if health["database"] != "ok":
        print("\nERROR: Database is not reachable. Start Postgres and run: alembic upgrade head")
        sys.exit(1)


def authed_client(token: str) -> httpx.Client:
    return httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {token}"},
    )


def register_org(org_name: str) -> dict:
    """Register a fresh organization and return the auth response.

    Uses a unique email per run so examples are idempotent.
    """
    run_id = uuid.uuid4().hex[:8]
    resp = httpx.post(
        f"{BASE}/auth/register",
        json={
            "email": f"admin-{run_id}@example.com",
            "password": PASSWORD,
            "firstName": "Demo",
            "lastName": f"Admin {run_id}",
            "organizationName": org_name,
        },
        timeout=10,
    )
    if resp.status_code != 201:
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)
    return resp.json()


def add_member(admin: httpx.Client, role: str = "MEMBER") -> tuple[dict, httpx.Client]:
    """Have the ADMIN add a user with `role`, log them in, return (auth, client)."""
    run_id = uuid.uuid4().hex[:8]
    email = f"{role.lower()}-{run_id}@example.com"
    resp = admin.post("/users", json={
        "email": email,
        "password": PASSWORD,
        "firstName": role.title(),
        "lastName": run_id,
        "role": role,
    })
    assert resp.status_code == 201, f"User creation failed: {resp.text}"

    resp = httpx.post(
        f"{BASE}/auth/login",
        json={"email": email, "password": PASSWORD},
        timeout=10,
    )
    assert resp.status_code == 200, f"Login failed: {resp.text}"
    auth = resp.json()
    return auth, authed_client(auth["token"])

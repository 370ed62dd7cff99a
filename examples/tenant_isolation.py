#!/usr/bin/env python3
"""
Tenant isolation — two organizations, one shared backend.

Organization B's ADMIN requests organization A's project and task ids.
Every request answers 404, exactly like an id that never existed.
Run with: python examples/tenant_isolation.py
"""

import uuid

from _common import authed_client, check_backend, register_org


def main():
    check_backend()

    a = authed_client(register_org("Org A")["token"])
    b = authed_client(register_org("Org B")["token"])

    project = a.post("/projects", json={"name": "Secret plans"}).json()
    task = a.post("/tasks", json={"projectId": project["id"], "title": "Hidden"}).json()
    print(f"Org A created project {project['id'][:8]}... and task {task['id'][:8]}...")

    attempts = [
        ("GET", f"/projects/{project['id']}"),
        ("DELETE", f"/projects/{project['id']}"),
        ("GET", f"/tasks/{task['id']}"),
        ("GET", f"/tasks/{task['id']}/comments"),
        ("GET", f"/tasks/{uuid.uuid4()}"),
    ]
    print("\nOrg B trying:")
    for method, path in attempts:
        resp = b.request(method, path)
        print(f"   {method:6s} {path:60s} → {resp.status_code} {resp.json()['detail']}")

    still_there = a.get(f"/projects/{project['id']}").status_code == 200
    print(f"\n✓ Org A's project untouched: {still_there}")


if __name__ == "__main__":
    main()

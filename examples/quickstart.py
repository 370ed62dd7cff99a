#!/usr/bin/env python3
"""
TaskHub Quickstart — Full lifecycle in one script.

Registers an org → adds a member → project → task → assign → comment → done.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

from _common import add_member, authed_client, check_backend, register_org


def main():
    check_backend()

    # ── Register organization (first user is ADMIN) ───────────────
    print("\n1. Registering organization...")
    admin_auth = register_org("Demo Corp")
    admin = authed_client(admin_auth["token"])
    print(f"   Org:   {admin_auth['tenantId'][:8]}...")
    print(f"   Admin: {admin_auth['email']} ({admin_auth['role']})")

    # ── Add a member ──────────────────────────────────────────────
    print("\n2. Adding a member...")
    member_auth, member = add_member(admin, role="MEMBER")
    print(f"   Member: {member_auth['email']} ({member_auth['role']})")

    # ── Create project ────────────────────────────────────────────
    print("\n3. Creating project...")
    resp = admin.post("/projects", json={"name": "Website", "description": "Relaunch"})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    project = resp.json()
    print(f"   Project: {project['name']} ({project['id'][:8]}...)")

    # ── Create task assigned to the member ────────────────────────
    print("\n4. Creating task...")
    resp = admin.post("/tasks", json={
        "projectId": project["id"],
        "title": "Add health check to API",
        "priority": "HIGH",
        "assignedTo": member_auth["userId"],
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    task = resp.json()
    print(f"   Task: {task['title']} [{task['status']}]")

    # ── Member works the task ─────────────────────────────────────
    print("\n5. Member picks up their tasks...")
    mine = member.get("/tasks/my-tasks").json()
    print(f"   {len(mine)} task(s) assigned")

    for status in ["IN_PROGRESS", "DONE"]:
        resp = member.put(f"/tasks/{task['id']}", json={"status": status})
        assert resp.status_code == 200, f"Failed transition to {status}: {resp.text}"
        print(f"   → {status}")

    resp = member.post(f"/tasks/{task['id']}/comments", json={"content": "Shipped."})
    assert resp.status_code == 201, f"Failed: {resp.text}"

    # ── Members cannot delete tasks ───────────────────────────────
    print("\n6. Member tries to delete the task...")
    resp = member.delete(f"/tasks/{task['id']}")
    print(f"   {resp.status_code} {resp.json()['detail']}")

    # ── Comment trail ─────────────────────────────────────────────
    print("\n7. Comments:")
    for comment in admin.get(f"/tasks/{task['id']}/comments").json():
        print(f"   [{comment['userName']}] {comment['content']}")

    print(f"\n✓ Complete lifecycle finished. Task {task['id'][:8]} is done.")


if __name__ == "__main__":
    main()

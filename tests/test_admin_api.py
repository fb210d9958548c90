from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from taskcal.models import Task

from conftest import auth


async def test_admin_routes_reject_regular_users(client, register):
    token, _ = await register("alice")

    for method, path in (("get", "/admin/users"), ("get", "/admin/stats"), ("delete", "/admin/users/1")):
        response = await client.request(method.upper(), path, headers=auth(token))
        assert response.status_code == 403, path


async def test_list_users(client, register, admin):
    admin_token, _ = admin
    await register("alice")

    response = await client.get("/admin/users", headers=auth(admin_token))

    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"root", "alice"}


async def test_promote_and_demote(client, register, admin):
    admin_token, _ = admin
    _, alice = await register("alice")

    promoted = await client.put(f"/admin/users/{alice['id']}/role", headers=auth(admin_token), json={"role": "admin"})
    assert promoted.status_code == 200
    assert promoted.json()["user"]["role"] == "admin"

    demoted = await client.put(f"/admin/users/{alice['id']}/role", headers=auth(admin_token), json={"role": "user"})
    assert demoted.json()["user"]["role"] == "user"


async def test_role_change_validation_and_missing_user(client, register, admin):
    admin_token, _ = admin
    _, alice = await register("alice")

    bad_role = await client.put(f"/admin/users/{alice['id']}/role", headers=auth(admin_token), json={"role": "owner"})
    missing = await client.put("/admin/users/9999/role", headers=auth(admin_token), json={"role": "admin"})

    assert bad_role.status_code == 400
    assert missing.status_code == 404


async def test_admin_cannot_change_own_role_or_delete_self(client, admin):
    admin_token, me = admin

    role = await client.put(f"/admin/users/{me['id']}/role", headers=auth(admin_token), json={"role": "user"})
    delete = await client.delete(f"/admin/users/{me['id']}", headers=auth(admin_token))

    assert role.status_code == 400
    assert role.json()["error"] == "self_action_forbidden"
    assert delete.status_code == 400
    assert (await client.get("/admin/stats", headers=auth(admin_token))).json()["totalUsers"] == 1


async def test_delete_missing_user(client, admin):
    admin_token, _ = admin

    response = await client.delete("/admin/users/9999", headers=auth(admin_token))

    assert response.status_code == 404


async def test_delete_user_cascades(client, register, admin, create_task):
    admin_token, _ = admin
    alice_token, alice = await register("alice", password="secret1")
    bob_token, _ = await register("bob")
    await create_task(alice_token, title="a1")
    await create_task(alice_token, title="a2")
    await create_task(bob_token, title="b1")
    await client.post("/share", headers=auth(alice_token), json={"email": "friend@example.com"})

    before = (await client.get("/admin/stats", headers=auth(admin_token))).json()
    assert before == {"totalUsers": 3, "totalTasks": 3, "totalShares": 1}

    response = await client.delete(f"/admin/users/{alice['id']}", headers=auth(admin_token))
    assert response.status_code == 200

    after = (await client.get("/admin/stats", headers=auth(admin_token))).json()
    assert after == {"totalUsers": 2, "totalTasks": 1, "totalShares": 0}

    # the old token still decodes, but the account behind it is gone
    assert (await client.get("/tasks", headers=auth(alice_token))).status_code == 401
    assert (await client.get("/shared", headers=auth(alice_token))).status_code == 401
    login = await client.post("/auth/login", json={"username": "alice", "password": "secret1"})
    assert login.status_code == 401


async def test_deleted_user_token_cannot_write(client, register, admin):
    admin_token, _ = admin
    alice_token, alice = await register("alice")
    await client.delete(f"/admin/users/{alice['id']}", headers=auth(admin_token))

    created = await client.post("/tasks", headers=auth(alice_token), json={
        "title": "T", "date": "2024-05-01", "priority": "low", "status": "pending",
    })
    shared = await client.post("/share", headers=auth(alice_token), json={"email": "friend@example.com"})

    assert created.status_code == 401
    assert created.json()["error"] == "unauthenticated"
    assert shared.status_code == 401
    stats = (await client.get("/admin/stats", headers=auth(admin_token))).json()
    assert stats == {"totalUsers": 1, "totalTasks": 0, "totalShares": 0}


async def test_storage_rejects_tasks_without_owner(db):
    db.add(Task(owner_id=9999, title="orphan", date=date(2024, 5, 1), priority="low", status="pending"))

    with pytest.raises(IntegrityError):
        await db.commit()

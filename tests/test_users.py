def test_supervisors_lists_supervisors_and_managers(client, org):
    resp = client.get("/users", params={"type": "supervisors"})
    assert resp.status_code == 200
    names = {row["username"] for row in resp.json()["supervisors"]}
    assert names == {"manager", "sup1", "sup2"}
    assert set(resp.json()["supervisors"][0]) == {"id", "username"}


def test_supervised_users(client, org):
    resp = client.get("/users", params={"type": "supervised", "userId": org["s1"]["id"]})
    assert resp.status_code == 200
    assert {row["username"] for row in resp.json()["users"]} == {"user1", "user2"}


def test_supervised_forbidden_for_user(client, org):
    resp = client.get("/users", params={"type": "supervised", "userId": org["u1"]["id"]})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Permission denied"}


def test_all_users_manager_only(client, org):
    resp = client.get("/users", params={"type": "all", "userId": org["m"]["id"]})
    assert resp.status_code == 200
    rows = resp.json()["users"]
    assert len(rows) == 7
    assert all("password_hash" not in row for row in rows)

    denied = client.get("/users", params={"type": "all", "userId": org["s1"]["id"]})
    assert denied.status_code == 403


def test_invalid_type_and_missing_user(client, org):
    assert client.get("/users", params={"type": "everyone"}).status_code == 400
    assert client.get("/users").status_code == 400
    missing = client.get("/users", params={"type": "all"})
    assert missing.status_code == 400
    assert missing.json() == {"error": "User ID is required"}


def test_unknown_actor_is_unauthenticated(client, org):
    resp = client.get("/users", params={"type": "all", "userId": "ghost"})
    assert resp.status_code == 401


def test_manager_changes_role(client, org, store):
    resp = client.put("/users", json={"userId": org["m"]["id"], "targetUserId": org["u4"]["id"], "role": "Supervisor"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "Supervisor"
    assert store.select("users", {"id": org["u4"]["id"]})[0]["role"] == "Supervisor"


def test_supervisor_cannot_change_role(client, org):
    resp = client.put("/users", json={"userId": org["s1"]["id"], "targetUserId": org["u1"]["id"], "role": "Manager"})
    assert resp.status_code == 403


def test_user_assigns_own_supervisor(client, org):
    resp = client.put("/users", json={
        "userId": org["u4"]["id"], "targetUserId": org["u4"]["id"], "supervisorId": org["s2"]["id"],
    })
    assert resp.status_code == 200
    assert resp.json()["user"]["supervisor_id"] == org["s2"]["id"]


def test_user_cannot_reassign_someone_else(client, org):
    resp = client.put("/users", json={
        "userId": org["u4"]["id"], "targetUserId": org["u1"]["id"], "supervisorId": org["s2"]["id"],
    })
    assert resp.status_code == 403


def test_supervisor_releases_own_supervisee(client, org):
    resp = client.put("/users", json={"userId": org["s1"]["id"], "targetUserId": org["u1"]["id"], "supervisorId": ""})
    assert resp.status_code == 200
    assert resp.json()["user"]["supervisor_id"] is None


def test_supervisor_cannot_touch_other_team(client, org):
    resp = client.put("/users", json={"userId": org["s1"]["id"], "targetUserId": org["u3"]["id"], "supervisorId": None})
    assert resp.status_code == 403


def test_new_supervisor_must_have_supervising_role(client, org):
    resp = client.put("/users", json={
        "userId": org["m"]["id"], "targetUserId": org["u1"]["id"], "supervisorId": org["u2"]["id"],
    })
    assert resp.status_code == 400
    assert resp.json()["error"] == "Assigned supervisor must have Supervisor or Manager role"


def test_user_cannot_supervise_themselves(client, org):
    resp = client.put("/users", json={
        "userId": org["m"]["id"], "targetUserId": org["s1"]["id"], "supervisorId": org["s1"]["id"],
    })
    assert resp.status_code == 400


def test_update_validation(client, org):
    assert client.put("/users", json={"userId": org["m"]["id"]}).status_code == 400
    nothing = client.put("/users", json={"userId": org["m"]["id"], "targetUserId": org["u1"]["id"]})
    assert nothing.status_code == 400
    assert nothing.json() == {"error": "Nothing to update"}
    missing = client.put("/users", json={"userId": org["m"]["id"], "targetUserId": "ghost", "role": "User"})
    assert missing.status_code == 404


def test_manager_cannot_demote_supervisor_with_supervisees(client, org, store):
    resp = client.put("/users", json={"userId": org["m"]["id"], "targetUserId": org["s1"]["id"], "role": "User"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "User still supervises other users"}
    assert store.select("users", {"id": org["s1"]["id"]})[0]["role"] == "Supervisor"

    supervisors = client.get("/users", params={"type": "supervisors"}).json()["supervisors"]
    assert org["s1"]["id"] in {row["id"] for row in supervisors}


def test_manager_demotes_supervisor_after_team_is_released(client, org):
    for key in ("u1", "u2"):
        released = client.put("/users", json={"userId": org["m"]["id"], "targetUserId": org[key]["id"], "supervisorId": None})
        assert released.status_code == 200

    resp = client.put("/users", json={"userId": org["m"]["id"], "targetUserId": org["s1"]["id"], "role": "User"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "User"


def test_promotion_between_supervising_roles_keeps_team(client, org):
    resp = client.put("/users", json={"userId": org["m"]["id"], "targetUserId": org["s1"]["id"], "role": "Manager"})
    assert resp.status_code == 200

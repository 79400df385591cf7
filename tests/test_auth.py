from taskdesk.utils.security import verify_token


def signup(client, username="alice", password="secret", **extra):
    return client.post("/auth", json={"username": username, "password": password, "isLogin": False, **extra})


def login(client, username="alice", password="secret"):
    return client.post("/auth", json={"username": username, "password": password, "isLogin": True})


def test_signup_returns_sanitized_user_and_token(client, store):
    resp = signup(client)
    assert resp.status_code == 200
    body = resp.json()

    assert body["user"]["username"] == "alice"
    assert body["user"]["role"] == "User"
    assert "password_hash" not in body["user"]
    assert body["token_type"] == "bearer"
    assert verify_token(body["access_token"])["sub"] == body["user"]["id"]

    stored = store.select("users", {"username": "alice"})[0]
    assert stored["password_hash"] != "secret"


def test_login_round_trip(client):
    user_id = signup(client).json()["user"]["id"]

    resp = login(client)
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user_id
    assert "password_hash" not in resp.json()["user"]


def test_wrong_password_and_unknown_user_look_the_same(client):
    signup(client)

    wrong = login(client, password="nope")
    unknown = login(client, username="bob")
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid username or password"}


def test_username_and_password_required(client):
    resp = client.post("/auth", json={"username": "alice", "isLogin": True})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Username and password are required"}


def test_duplicate_username_conflicts(client):
    signup(client)
    resp = signup(client)
    assert resp.status_code == 409
    assert resp.json()["error"] == "Username already exists"


def test_signup_with_supervisor(client, make_user):
    boss = make_user("boss", "Supervisor")
    resp = signup(client, supervisorId=boss["id"])
    assert resp.status_code == 200
    assert resp.json()["user"]["supervisor_id"] == boss["id"]


def test_signup_rejects_plain_user_as_supervisor(client, make_user):
    peer = make_user("peer", "User")
    resp = signup(client, supervisorId=peer["id"])
    assert resp.status_code == 400
    assert resp.json()["error"] == "Assigned supervisor must have Supervisor or Manager role"


def test_signup_rejects_unknown_supervisor(client):
    resp = signup(client, supervisorId="does-not-exist")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid supervisor ID"


def test_signup_with_role(client):
    resp = signup(client, role="Supervisor")
    assert resp.json()["user"]["role"] == "Supervisor"


def test_signup_with_invalid_role_is_a_validation_error(client):
    resp = signup(client, role="Admin")
    assert resp.status_code == 400
    assert "error" in resp.json()

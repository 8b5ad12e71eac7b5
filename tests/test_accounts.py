from twitterclone.app.models import Account

from conftest import login, register


def test_register_and_login(app, client):
    r = register(client, "alice", name="Alice", gender="Female")
    assert r.status_code == 200
    assert r.json["message"] == "User created successfully"

    with app.app_context():
        account = Account.query.filter_by(username="alice").first()
        assert account.name == "Alice"
        assert account.gender == "Female"
        assert account.password_hash != "secret1"

    assert login(client, "alice").status_code == 200


def test_duplicate_username_is_rejected(client):
    register(client, "alice")
    r = register(client, "alice")
    assert r.status_code == 400
    assert r.json["error"]["message"] == "User already exists"


def test_bad_gender_is_rejected(app, client):
    r = register(client, "alice", gender="Robot")
    assert r.status_code == 400
    assert r.json["error"]["code"] == "invalid_gender"
    with app.app_context():
        assert Account.query.count() == 0


def test_short_password_is_rejected(client):
    r = register(client, "alice", password="12345")
    assert r.status_code == 400
    assert r.json["error"]["message"] == "Password is too short"


def test_missing_fields(client):
    r = client.post("/register", json={"username": "alice"})
    assert r.status_code == 400
    assert set(r.json["error"]["details"]["missing"]) == {"password", "name", "gender"}


def test_non_json_body(client):
    r = client.post("/register", data="username=alice")
    assert r.status_code == 400
    assert r.json["error"]["code"] == "invalid_json"


def test_wrong_password_and_unknown_user_look_alike(client):
    register(client, "alice")
    wrong = login(client, "alice", password="nope-nope")
    unknown = login(client, "nobody")
    assert wrong.status_code == unknown.status_code == 400
    assert wrong.json["error"]["message"] == unknown.json["error"]["message"]
    assert "token" not in (wrong.json or {})


def test_profile_counts(client, make_user):
    alice_id, alice = make_user("alice")
    bob_id, bob = make_user("bob")
    carol_id, carol = make_user("carol")

    client.post(f"/follow/{bob_id}", headers=alice)
    client.post(f"/follow/{alice_id}", headers=bob)
    client.post(f"/follow/{alice_id}", headers=carol)

    r = client.get("/profile", headers=alice)
    assert r.status_code == 200
    assert r.json == {"username": "alice", "name": "Alice", "followersCount": 2, "followingCount": 1}


def test_blank_username_or_name_is_rejected(app, client):
    r = register(client, "   ", name="Somebody")
    assert r.status_code == 400
    assert r.json["error"]["message"] == "Username cannot be blank"

    r = register(client, "alice", name="   ")
    assert r.status_code == 400
    assert r.json["error"]["message"] == "Name cannot be blank"

    with app.app_context():
        assert Account.query.count() == 0
    assert login(client, "   ").status_code == 400


def test_username_is_stored_trimmed(app, client):
    assert register(client, "  alice  ", name="Alice").status_code == 200
    with app.app_context():
        assert Account.query.one().username == "alice"
    assert register(client, "alice").status_code == 400

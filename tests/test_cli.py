from twitterclone.app.models import Account, Follower, Tweet


def test_seed_is_idempotent(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed"])
    assert result.exit_code == 0
    assert "Seed complete" in result.output

    again = runner.invoke(args=["seed"])
    assert again.exit_code == 0
    assert "already exist" in again.output

    with app.app_context():
        assert Account.query.count() == 3
        assert Follower.query.count() == 1
        assert Tweet.query.count() == 1


def test_seeded_account_can_log_in(app, client):
    app.test_cli_runner().invoke(args=["seed"])
    r = client.post("/login", json={"username": "alice", "password": "secret1"})
    assert r.status_code == 200
    assert r.json["token"]

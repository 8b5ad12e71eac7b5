from twitterclone.app.extensions import db
from twitterclone.app.models import Notification


def test_notifications_newest_first(client, make_user):
    alice_id, alice = make_user("alice")
    _, bob = make_user("bob")

    client.post(f"/follow/{alice_id}", headers=bob)
    tweet_id = client.post("/user/tweets", json={"tweet": "hi"}, headers=alice).json["tweet"]["tweetId"]
    client.post(f"/tweets/{tweet_id}/like", headers=bob)

    items = client.get("/notifications/", headers=alice).json
    assert [n["type"] for n in items] == ["like", "follow"]
    assert all(n["is_read"] is False for n in items)
    assert client.get("/notifications/", headers=bob).json == []


def test_mark_read(app, client, make_user):
    alice_id, alice = make_user("alice")
    _, bob = make_user("bob")
    client.post(f"/follow/{alice_id}", headers=bob)

    notification_id = client.get("/notifications/", headers=alice).json[0]["id"]
    r = client.post(f"/notifications/{notification_id}/read", headers=alice)
    assert r.status_code == 200

    with app.app_context():
        assert db.session.get(Notification, notification_id).is_read is True


def test_cannot_mark_someone_elses_notification(app, client, make_user):
    alice_id, alice = make_user("alice")
    _, bob = make_user("bob")
    client.post(f"/follow/{alice_id}", headers=bob)
    notification_id = client.get("/notifications/", headers=alice).json[0]["id"]

    r = client.post(f"/notifications/{notification_id}/read", headers=bob)
    assert r.status_code == 404
    assert client.post("/notifications/9999/read", headers=alice).status_code == 404

    with app.app_context():
        assert db.session.get(Notification, notification_id).is_read is False

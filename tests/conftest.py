import os
import sys
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from twitterclone.app.config import TestingConfig
from twitterclone.app.extensions import db
from twitterclone.app.factory import create_app

PASSWORD = "secret1"


@pytest.fixture()
def app():
    # Fresh in-memory SQLite per test.
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


def register(client, username, name=None, gender="Other", password=PASSWORD):
    return client.post(
        "/register",
        json={"username": username, "password": password, "name": name or username.title(), "gender": gender},
    )


def login(client, username, password=PASSWORD):
    return client.post("/login", json={"username": username, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(app, client):
    """Register + log in a user; returns (account_id, auth headers)."""

    def _make(username, gender="Other"):
        assert register(client, username, gender=gender).status_code == 200
        resp = login(client, username)
        assert resp.status_code == 200
        token = resp.json["token"]
        claims = app.extensions["token_service"].decode(token)
        return claims.account_id, bearer(token)

    return _make

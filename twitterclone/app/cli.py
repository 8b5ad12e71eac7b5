from __future__ import annotations

from flask import Blueprint
from werkzeug.security import generate_password_hash

from twitterclone.app.extensions import db
from twitterclone.app.models import Account, Follower, Tweet

cli_bp = Blueprint("cli", __name__, cli_group=None)

DEMO_PASSWORD = "secret1"
DEMO_ACCOUNTS = [
    ("alice", "Alice", "Female"),
    ("bob", "Bob", "Male"),
    ("carol", "Carol", "Other"),
]


@cli_bp.cli.command("init-db")
def init_db() -> None:
    """Create tables."""
    db.create_all()
    print("DB initialized (tables created).")


@cli_bp.cli.command("seed")
def seed_data() -> None:
    """Seed demo accounts: alice follows bob, bob has one tweet.

    Safe to run multiple times; it will no-op if data exists.
    """
    db.create_all()

    if Account.query.filter_by(username="alice").first():
        print("Demo accounts already exist.")
        return

    accounts = {}
    for username, name, gender in DEMO_ACCOUNTS:
        account = Account(
            username=username,
            name=name,
            gender=gender,
            password_hash=generate_password_hash(DEMO_PASSWORD),
        )
        db.session.add(account)
        accounts[username] = account
    db.session.flush()

    db.session.add(Follower(follower_user_id=accounts["alice"].id, following_user_id=accounts["bob"].id))
    db.session.add(Tweet(user_id=accounts["bob"].id, tweet="Hello from Bob!"))
    db.session.commit()
    print(f"Seed complete. Login: alice / {DEMO_PASSWORD}")

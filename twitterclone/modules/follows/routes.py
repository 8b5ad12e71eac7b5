from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from twitterclone.app import rules
from twitterclone.app.common.auth import current_identity, get_store, login_required

bp = Blueprint("follows", __name__)


def _account(a) -> dict:
    return {"user_id": a.id, "name": a.name, "username": a.username}


@bp.post("/follow/<int:user_id>")
@login_required
def follow(user_id: int):
    """POST /follow/<id> - Follow another account."""
    rules.follow(get_store(), current_identity(), user_id)
    return {"message": "Followed successfully"}, 200


@bp.post("/unfollow/<int:user_id>")
@login_required
def unfollow(user_id: int):
    """POST /unfollow/<id> - Unfollow; a missing edge is fine."""
    rules.unfollow(get_store(), current_identity(), user_id)
    return {"message": "Unfollowed successfully"}, 200


@bp.get("/following")
@login_required
def list_following():
    accounts = get_store().following_of(current_identity().account_id)
    return jsonify([_account(a) for a in accounts]), 200


@bp.get("/followers")
@login_required
def list_followers():
    accounts = get_store().followers_of(current_identity().account_id)
    return jsonify([_account(a) for a in accounts]), 200


# Older name-only listings
@bp.get("/user/following/")
@login_required
def following_names():
    accounts = get_store().following_of(current_identity().account_id)
    return jsonify([{"name": a.name} for a in accounts]), 200


@bp.get("/user/followers/")
@login_required
def follower_names():
    accounts = get_store().followers_of(current_identity().account_id)
    return jsonify([{"name": a.name} for a in accounts]), 200


@bp.get("/suggestions")
@login_required
def suggestions():
    """GET /suggestions - A few random accounts the caller does not follow yet."""
    accounts = rules.suggestions(get_store(), current_identity(), current_app.config["SUGGESTIONS_LIMIT"])
    return jsonify([_account(a) for a in accounts]), 200

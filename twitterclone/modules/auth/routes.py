from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from werkzeug.security import generate_password_hash, check_password_hash

from twitterclone.app.models import GENDERS
from twitterclone.app.common.validation import get_json, require_fields, require_text
from twitterclone.app.common.errors import NotFound, ValidationFailed
from twitterclone.app.common.auth import current_identity, get_store, get_token_service, login_required

bp = Blueprint("auth", __name__)

MIN_PASSWORD_LENGTH = 6


@bp.post("/register")
def register():
    """POST /register - Create a new account."""
    data = get_json()
    require_fields(data, ["username", "password", "name", "gender"])

    username = require_text(data["username"], "Username cannot be blank")
    name = require_text(data["name"], "Name cannot be blank")
    password = str(data["password"])
    gender = data["gender"]

    if gender not in GENDERS:
        raise ValidationFailed("Invalid gender. Choose 'Male', 'Female', or 'Other'.", code="invalid_gender")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed("Password is too short", code="password_too_short")

    store = get_store()
    if store.find_account_by_handle(username):
        raise ValidationFailed("User already exists", code="user_exists")

    store.create_account(
        name=name,
        username=username,
        password_hash=generate_password_hash(password),
        gender=gender,
    )
    store.commit()
    return {"message": "User created successfully"}, 200


@bp.post("/login")
def login():
    """POST /login - Verify password, hand out a token (body + cookie)."""
    data = get_json()
    require_fields(data, ["username", "password"])

    account = get_store().find_account_by_handle(str(data["username"]).strip())
    if not account or not check_password_hash(account.password_hash, str(data["password"])):
        raise ValidationFailed("Invalid username or password", code="invalid_login")

    tokens = get_token_service()
    token = tokens.issue(account.username, account.id)

    resp = jsonify({"message": "Login successful", "token": token})
    resp.set_cookie(
        current_app.config["AUTH_COOKIE_NAMES"][0],
        token,
        max_age=tokens.expires_in,
        httponly=True,
        secure=current_app.config["AUTH_COOKIE_SECURE"],
        samesite="Lax",
    )
    return resp, 200


@bp.post("/logout")
def logout():
    """POST /logout - Drop the auth cookies. The token itself stays valid until it expires."""
    resp = jsonify({"message": "Logged out"})
    for name in current_app.config["AUTH_COOKIE_NAMES"]:
        resp.delete_cookie(name)
    return resp, 200


@bp.get("/profile")
@login_required
def profile():
    """GET /profile - Caller's profile with follow counts."""
    store = get_store()
    account = store.find_account_by_id(current_identity().account_id)
    if not account:
        raise NotFound("User not found")

    followers, following = store.follow_counts(account.id)
    return {
        "username": account.username,
        "name": account.name,
        "followersCount": followers,
        "followingCount": following,
    }, 200

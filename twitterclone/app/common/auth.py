"""Token-based auth gate.

Login issues a signed JWT binding `{handle, account_id}`. Every protected
request presents it again (bearer header or cookie); `login_required`
verifies it, re-resolves the handle through the store and puts the caller's
`Identity` on `flask.g` before the view runs. Nothing is persisted server-side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Callable, Iterable, Optional, TypeVar

import jwt
from flask import Request, current_app, g, request

from twitterclone.app.common.errors import AuthFailure, CredentialError
from twitterclone.app.store.base import Store

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Identity:
    account_id: int
    handle: str


@dataclass(frozen=True)
class TokenClaims:
    handle: str
    account_id: int
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and checks the bearer tokens handed out at login."""

    def __init__(self, secret: str, expires_in: int = 3600, algorithm: str = "HS256") -> None:
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, handle: str, account_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "handle": handle,
            "account_id": account_id,
            "iat": now,
            "exp": now + timedelta(seconds=self.expires_in),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        """Check signature and expiry only; no account lookup."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise CredentialError(AuthFailure.EXPIRED)
        except jwt.InvalidTokenError as e:
            raise CredentialError(AuthFailure.INVALID, f"invalid token: {e}")

        handle = payload.get("handle")
        account_id = payload.get("account_id")
        if not isinstance(handle, str) or not handle or not isinstance(account_id, int):
            raise CredentialError(AuthFailure.INVALID, "token claims missing or mistyped")

        return TokenClaims(
            handle=handle,
            account_id=account_id,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def verify(self, token: str, store: Store) -> Identity:
        claims = self.decode(token)
        account = store.find_account_by_handle(claims.handle)
        # A re-created account under the same handle does not inherit old tokens.
        if account is None or account.id != claims.account_id:
            raise CredentialError(AuthFailure.UNKNOWN_ACCOUNT, f"handle {claims.handle!r} no longer resolves")
        return Identity(account_id=account.id, handle=account.username)


def extract_credential(req: Request, cookie_names: Iterable[str] = ("token", "jwtToken")) -> Optional[str]:
    """Return the presented token: bearer header first, then each cookie name in order."""
    header = req.headers.get("Authorization", "")
    if header.startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX):].strip()
        if token:
            return token
    for name in cookie_names:
        token = req.cookies.get(name)
        if token:
            return token
    return None


def get_token_service() -> TokenService:
    return current_app.extensions["token_service"]


def get_store() -> Store:
    return current_app.extensions["store"]


def authenticate() -> Identity:
    token = extract_credential(request, current_app.config["AUTH_COOKIE_NAMES"])
    if token is None:
        raise CredentialError(AuthFailure.MISSING)
    return get_token_service().verify(token, get_store())


def current_identity() -> Identity:
    return g.identity


def login_required(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            g.identity = authenticate()
        except CredentialError as e:
            logger.info("Rejected credential on %s %s: %s", request.method, request.path, e.reason)
            raise
        return fn(*args, **kwargs)

    return wrapper  # type: ignore

from __future__ import annotations

from typing import Any, Dict, Iterable
from flask import request

from twitterclone.app.common.errors import ValidationFailed


def get_json() -> Dict[str, Any]:
    if not request.is_json:
        raise ValidationFailed("Request must be application/json", code="invalid_json")
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        raise ValidationFailed("Malformed JSON body", code="invalid_json")
    return data


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise ValidationFailed("Missing required fields", details={"missing": missing})


def require_text(value: Any, message: str) -> str:
    """Return `value` stripped, or reject it when it is not a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailed(message)
    return value.strip()

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ApiError(Exception):
    """Raise to return a consistent JSON error response."""

    status_code: int
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self, request_id: str | None = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details or {},
                "request_id": request_id,
            }
        }
        return payload


class AuthFailure(str, enum.Enum):
    MISSING = "missing"
    INVALID = "invalid"
    EXPIRED = "expired"
    UNKNOWN_ACCOUNT = "unknown_account"


class CredentialError(ApiError):
    """No usable credential. Every cause renders the same 401 body.

    `cause` is for server-side logs only.
    """

    def __init__(self, cause: AuthFailure, reason: str | None = None) -> None:
        super().__init__(status_code=401, code="unauthorized", message="Invalid JWT Token")
        self.cause = cause
        self.reason = reason or cause.value


class ValidationFailed(ApiError):
    def __init__(self, message: str, code: str = "validation_error", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(status_code=400, code=code, message=message, details=details)


class Forbidden(ApiError):
    def __init__(self, message: str, code: str = "forbidden") -> None:
        super().__init__(status_code=403, code=code, message=message)


class NotFound(ApiError):
    def __init__(self, message: str, code: str = "not_found") -> None:
        super().__init__(status_code=404, code=code, message=message)


class StorageError(ApiError):
    def __init__(self, operation: str) -> None:
        super().__init__(status_code=500, code="storage_error", message="Internal server error")
        self.operation = operation

"""Error taxonomy shared by services and the HTTP layer.

Services raise these; the application turns them into
``{"error": {"code": ..., "message": ...}}`` responses.
"""

from __future__ import annotations

from typing import Dict, Optional


class ArenaError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "InternalError"
    status_code = 500

    def __init__(self, message: str, *, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers or {}

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(ArenaError):
    code = "ValidationError"
    status_code = 400


class AuthenticationError(ArenaError):
    code = "AuthenticationError"
    status_code = 401


class AuthorizationError(ArenaError):
    code = "AuthorizationError"
    status_code = 403


class NotFoundError(ArenaError):
    code = "NotFoundError"
    status_code = 404


class ConflictError(ArenaError):
    code = "ConflictError"
    status_code = 409


class RateLimitedError(ArenaError):
    code = "RateLimited"
    status_code = 429


class DependencyError(ArenaError):
    """Storage or other infrastructure failure unrelated to business rules."""

    code = "DependencyError"
    status_code = 500


class ServiceUnavailableError(ArenaError):
    code = "ServiceUnavailable"
    status_code = 503


__all__ = [
    "ArenaError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DependencyError",
    "NotFoundError",
    "RateLimitedError",
    "ServiceUnavailableError",
    "ValidationError",
]

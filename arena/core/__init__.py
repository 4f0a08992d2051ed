"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    BOOKMARKLET_ENABLED,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DB_RESET,
    FRONTEND_ORIGIN,
    FRONTEND_ORIGINS,
    MAX_IMAGE_BYTES,
    SECRET_KEY,
    UPLOAD_DIR,
)
from .database import engine, get_session
from .log import get_logger, setup_logging
from .time import as_utc, isoformat, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "BOOKMARKLET_ENABLED",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DB_RESET",
    "FRONTEND_ORIGIN",
    "FRONTEND_ORIGINS",
    "MAX_IMAGE_BYTES",
    "SECRET_KEY",
    "UPLOAD_DIR",
    "as_utc",
    "engine",
    "get_logger",
    "get_session",
    "isoformat",
    "setup_logging",
    "utcnow",
]

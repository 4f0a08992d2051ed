"""Aggregate API routers."""

from fastapi import APIRouter

from .bookmarklet import router as bookmarklet_router
from .notifications import router as notifications_router
from .rankings import router as rankings_router
from .scores import router as scores_router
from .system import router as system_router
from .users import router as users_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    users_router,
    scores_router,
    bookmarklet_router,
    rankings_router,
    notifications_router,
)

__all__ = ["ALL_ROUTERS"]

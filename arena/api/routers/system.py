"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core import config
from ...models import MAX_SCORE, MIN_SCORE

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/healthz")
def healthz() -> JSONResponse:
    """Kubernetes-style readiness endpoint."""

    return JSONResponse({"ok": True})


@router.get("/config")
def get_config() -> Dict[str, Any]:
    """Expose frontend configuration values."""

    return {
        "bookmarklet_enabled": config.BOOKMARKLET_ENABLED,
        "score_range": [MIN_SCORE, MAX_SCORE],
        "max_image_bytes": config.MAX_IMAGE_BYTES,
    }


__all__ = ["router"]

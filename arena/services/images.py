"""Evidence image storage on the local upload directory.

The score store only keeps the returned relative path as an opaque
``image_reference``.
"""

from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..core.config import MAX_IMAGE_BYTES, UPLOAD_DIR
from ..core.errors import DependencyError, NotFoundError, ValidationError
from ..core.log import get_logger
from ..core.time import utcnow

logger = get_logger("images")

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}


def store_score_image(
    *,
    tournament_id: uuid.UUID,
    user_id: uuid.UUID,
    song_id: uuid.UUID,
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
    upload_dir: Path = UPLOAD_DIR,
    now: Optional[datetime] = None,
) -> str:
    """Validate and write an uploaded image, returning its reference."""

    if not data:
        raise ValidationError("An image file is required")
    if not (content_type or "").startswith("image/"):
        raise ValidationError("Please upload an image file")
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError(f"Images must be {MAX_IMAGE_BYTES // (1024 * 1024)} MB or smaller")

    ext = (os.path.splitext(filename or "")[1] or ".jpg").lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationError("Unsupported image type")

    stamp = int((now or utcnow()).timestamp() * 1000)
    reference = f"{tournament_id}/{user_id}/{song_id}_{stamp}{ext}"
    destination = upload_dir / reference
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
    except OSError as exc:
        logger.error("Failed to store image %s", reference, exc_info=True)
        raise DependencyError("Could not store the image, please try again later") from exc
    return reference


def discard_image(reference: str, upload_dir: Path = UPLOAD_DIR) -> None:
    try:
        (upload_dir / reference).unlink(missing_ok=True)
    except OSError:
        logger.warning("Failed to remove orphaned image %s", reference, exc_info=True)


def resolve_image_path(reference: str, upload_dir: Path = UPLOAD_DIR) -> Path:
    root = upload_dir.resolve()
    path = (root / reference).resolve()
    if root not in path.parents or not path.is_file():
        raise NotFoundError("File not found")
    return path


__all__ = [
    "ALLOWED_IMAGE_EXTENSIONS",
    "discard_image",
    "resolve_image_path",
    "store_score_image",
]

"""Input parsing helpers that raise ``ValidationError`` on bad input."""

from __future__ import annotations

import uuid
from typing import Any

from ..core.errors import ValidationError
from ..models import MAX_SCORE, MIN_SCORE, SubmissionChannel


def parse_uuid(raw: Any, label: str) -> uuid.UUID:
    if isinstance(raw, uuid.UUID):
        return raw
    if not raw or not isinstance(raw, str):
        raise ValidationError(f"{label} is required")
    try:
        return uuid.UUID(raw.strip())
    except ValueError as exc:
        raise ValidationError(f"{label} is not a valid identifier") from exc


def validate_score_value(raw: Any) -> int:
    """Coerce a submitted score to an int within the game's bounds."""

    if raw is None or raw == "":
        raise ValidationError("Score is required")
    if isinstance(raw, bool):
        raise ValidationError("Score must be a whole number")

    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise ValidationError("Score must be a whole number")
        value = int(raw)
    elif isinstance(raw, str):
        try:
            value = int(raw.strip())
        except ValueError as exc:
            raise ValidationError("Score must be a whole number") from exc
    else:
        raise ValidationError("Score must be a whole number")

    if value < MIN_SCORE or value > MAX_SCORE:
        raise ValidationError(f"Score must be between {MIN_SCORE} and {MAX_SCORE:,}")
    return value


def parse_channel(raw: Any) -> SubmissionChannel:
    if isinstance(raw, SubmissionChannel):
        return raw
    try:
        return SubmissionChannel((raw or "").strip().lower())
    except (ValueError, AttributeError) as exc:
        raise ValidationError("submitted_via must be one of manual, bookmarklet, image") from exc


__all__ = ["parse_channel", "parse_uuid", "validate_score_value"]

"""Score submission endpoint used by the in-game bookmarklet."""

from __future__ import annotations

import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...core import config, get_session
from ...core.errors import ServiceUnavailableError
from ...models import SubmissionChannel
from ...services.notifications import Notifier
from ...services.submissions import submit_score
from ...services.validation import parse_uuid
from ..deps import current_user_id, get_notifier, rate_limit
from .scores import outcome_response

router = APIRouter(prefix="/api/bookmarklet", tags=["bookmarklet"])


def require_bookmarklet_enabled() -> None:
    if not config.BOOKMARKLET_ENABLED:
        raise ServiceUnavailableError("Bookmarklet submissions are currently disabled")


@router.post("/submit", dependencies=[Depends(require_bookmarklet_enabled)])
def bookmarklet_submit(
    body: Dict[str, Any],
    user_id: uuid.UUID = Depends(current_user_id),
    _: None = Depends(rate_limit("bookmarklet")),
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    """Submit a score scraped from the game's record page."""

    outcome = submit_score(
        session,
        tournament_id=parse_uuid(body.get("tournament_id"), "tournament_id"),
        user_id=user_id,
        song_id=parse_uuid(body.get("song_id"), "song_id"),
        value=body.get("score"),
        channel=SubmissionChannel.bookmarklet,
        notifier=notifier,
    )
    return outcome_response(outcome, success=True)


__all__ = ["router"]

"""Ranking endpoints."""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...core import get_session
from ...core.errors import AuthenticationError, AuthorizationError
from ...services.catalog import can_view_ranking, get_tournament, require_organizer
from ...services.ranking import calculate_ranking
from ...services.validation import parse_uuid
from ..deps import current_user_id, optional_user_id

router = APIRouter(tags=["rankings"])


@router.get("/tournaments/{tournament_id}/ranking")
def get_ranking(
    tournament_id: str,
    user_id: Optional[uuid.UUID] = Depends(optional_user_id),
    session: Session = Depends(get_session),
):
    """Get the ranking of a tournament by total approved score."""

    tournament = get_tournament(session, parse_uuid(tournament_id, "tournament_id"))
    if not can_view_ranking(session, tournament, user_id):
        if user_id is None:
            raise AuthenticationError("Authentication required")
        raise AuthorizationError("You cannot view the ranking of this tournament")

    entries = calculate_ranking(session, tournament.id)
    return {
        "tournament_id": str(tournament.id),
        "rankings": [entry.to_dict() for entry in entries],
    }


@router.post("/tournaments/{tournament_id}/recalculate")
def recalculate_ranking(
    tournament_id: str,
    user_id: uuid.UUID = Depends(current_user_id),
    session: Session = Depends(get_session),
):
    """Recompute the ranking on organizer request."""

    tournament = get_tournament(session, parse_uuid(tournament_id, "tournament_id"))
    require_organizer(tournament, user_id)
    entries = calculate_ranking(session, tournament.id)
    return {
        "success": True,
        "message": "Ranking recalculated",
        "ranking": [entry.to_dict() for entry in entries],
    }


__all__ = ["router"]

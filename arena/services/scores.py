"""Score Record Store queries and serialisation."""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from ..core.errors import NotFoundError
from ..core.time import isoformat
from ..models import DIRECT_CHANNELS, Score, ScoreStatus


def get_score(session: Session, score_id: uuid.UUID) -> Score:
    score = session.get(Score, score_id)
    if not score:
        raise NotFoundError("Score record not found")
    return score


def find_reconciled_score(
    session: Session,
    tournament_id: uuid.UUID,
    user_id: uuid.UUID,
    song_id: uuid.UUID,
) -> Optional[Score]:
    """Return the approved manual/bookmarklet record for a triple, if any."""

    return session.exec(
        select(Score).where(
            Score.tournament_id == tournament_id,
            Score.user_id == user_id,
            Score.song_id == song_id,
            Score.status == ScoreStatus.approved,
            Score.submission_channel.in_(list(DIRECT_CHANNELS)),
        )
    ).first()


def list_user_scores(
    session: Session, tournament_id: uuid.UUID, user_id: uuid.UUID
) -> List[Score]:
    return list(
        session.exec(
            select(Score)
            .where(Score.tournament_id == tournament_id, Score.user_id == user_id)
            .order_by(Score.submitted_at.desc())
        ).all()
    )


def list_pending_scores(session: Session, tournament_id: uuid.UUID) -> List[Score]:
    return list(
        session.exec(
            select(Score)
            .where(
                Score.tournament_id == tournament_id,
                Score.status == ScoreStatus.pending,
            )
            .order_by(Score.submitted_at.asc())
        ).all()
    )


def score_to_dict(score: Score) -> Dict[str, Any]:
    """Serialise a score model to API-friendly dict."""

    return {
        "id": str(score.id),
        "tournament_id": str(score.tournament_id),
        "user_id": str(score.user_id),
        "song_id": str(score.song_id),
        "score": score.value,
        "status": score.status.value,
        "submitted_via": score.submission_channel.value,
        "image_reference": score.image_reference,
        "submitted_at": isoformat(score.submitted_at),
        "approved_at": isoformat(score.approved_at),
        "approved_by": str(score.approved_by) if score.approved_by else None,
    }


__all__ = [
    "find_reconciled_score",
    "get_score",
    "list_pending_scores",
    "list_user_scores",
    "score_to_dict",
]

"""Organizer review of image submissions and score maintenance."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ..core.errors import ConflictError, DependencyError
from ..core.log import get_logger
from ..core.time import utcnow
from ..models import Score, ScoreStatus, Song, Tournament
from .catalog import get_tournament, require_organizer
from .notifications import Notifier
from .scores import get_score
from .validation import validate_score_value

logger = get_logger("approvals")


def _load_for_organizer(
    session: Session, score_id: uuid.UUID, organizer_id: uuid.UUID
) -> tuple[Score, Tournament]:
    score = get_score(session, score_id)
    tournament = get_tournament(session, score.tournament_id)
    require_organizer(tournament, organizer_id)
    return score, tournament


def _transition(
    session: Session, score: Score, new_status: ScoreStatus, **values: Any
) -> None:
    """Move a pending record to a terminal status, or fail with a conflict."""

    try:
        result = session.exec(
            update(Score)
            .where(Score.id == score.id, Score.status == ScoreStatus.pending)
            .values(status=new_status, **values)
        )
        if result.rowcount != 1:
            session.rollback()
            raise ConflictError("Only pending submissions can be reviewed")
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Storage failure while reviewing score %s", score.id, exc_info=True)
        raise DependencyError("Could not update the score, please try again later") from exc
    session.refresh(score)


def approve_score(
    session: Session,
    *,
    score_id: uuid.UUID,
    organizer_id: uuid.UUID,
    value: Any,
    notifier: Optional[Notifier] = None,
    now: Optional[datetime] = None,
) -> Score:
    """Approve a pending submission with the organizer-read value.

    Other approved records for the same song are left alone, so an approved
    image score counts alongside any manual or bookmarklet score.
    """

    value = validate_score_value(value)
    score, tournament = _load_for_organizer(session, score_id, organizer_id)
    if score.status is not ScoreStatus.pending:
        raise ConflictError("Only pending submissions can be approved")

    _transition(
        session,
        score,
        ScoreStatus.approved,
        value=value,
        approved_at=now or utcnow(),
        approved_by=organizer_id,
    )
    logger.info("Score %s approved by %s with value %s", score.id, organizer_id, value)

    if notifier is not None:
        song_title = _song_title(session, score.song_id)
        notifier.notify_player(
            score.user_id,
            tournament,
            f"Your score for “{tournament.title}” was approved ({song_title}: {value})",
        )
    return score


def reject_score(
    session: Session,
    *,
    score_id: uuid.UUID,
    organizer_id: uuid.UUID,
    notifier: Optional[Notifier] = None,
) -> Score:
    score, tournament = _load_for_organizer(session, score_id, organizer_id)
    if score.status is not ScoreStatus.pending:
        raise ConflictError("Only pending submissions can be rejected")

    _transition(session, score, ScoreStatus.rejected)
    logger.info("Score %s rejected by %s", score.id, organizer_id)

    if notifier is not None:
        song_title = _song_title(session, score.song_id)
        notifier.notify_player(
            score.user_id,
            tournament,
            f"Your submission for “{tournament.title}” was rejected ({song_title})",
        )
    return score


def correct_score(
    session: Session, *, score_id: uuid.UUID, organizer_id: uuid.UUID, value: Any
) -> Score:
    """Overwrite the value of an approved record."""

    value = validate_score_value(value)
    score, _ = _load_for_organizer(session, score_id, organizer_id)
    if score.status is not ScoreStatus.approved:
        raise ConflictError("Only approved scores can be corrected")

    score.value = value
    try:
        session.add(score)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Storage failure while correcting score %s", score_id, exc_info=True)
        raise DependencyError("Could not update the score, please try again later") from exc
    session.refresh(score)
    logger.info("Score %s corrected by %s to %s", score.id, organizer_id, value)
    return score


def delete_score(
    session: Session, *, score_id: uuid.UUID, organizer_id: uuid.UUID
) -> None:
    score, _ = _load_for_organizer(session, score_id, organizer_id)
    try:
        session.delete(score)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Storage failure while deleting score %s", score_id, exc_info=True)
        raise DependencyError("Could not delete the score, please try again later") from exc
    logger.info("Score %s deleted by %s", score_id, organizer_id)


def _song_title(session: Session, song_id: uuid.UUID) -> str:
    song = session.get(Song, song_id)
    return song.title if song else "song"


__all__ = ["approve_score", "correct_score", "delete_score", "reject_score"]

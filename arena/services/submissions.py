"""Submission reconciliation.

A manual or bookmarklet submission reconciles with the approved record for
its (tournament, user, song) triple: the first submission creates it, a
higher value overwrites it in place, and anything else leaves it untouched.
Image submissions always create a new pending record for organizer review.

Two writers racing on the same triple are serialised by the store: the
partial unique index on approved manual/bookmarklet records rejects a
duplicate insert, and the update only applies while the stored value is
still lower. Either way the loser re-reads and reconciles again.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from ..core.errors import ConflictError, DependencyError, ValidationError
from ..core.log import get_logger
from ..core.time import utcnow
from ..models import Score, ScoreStatus, Song, SubmissionChannel, Tournament
from .catalog import (
    display_name_for,
    get_song,
    get_tournament,
    require_channel_allowed,
    require_open_for_submissions,
    require_participant,
    require_song_in_pool,
)
from .notifications import Notifier
from .scores import find_reconciled_score
from .validation import parse_channel, validate_score_value

logger = get_logger("submissions")

MAX_RECONCILE_ATTEMPTS = 3


class SubmissionResult(str, Enum):
    created = "created"
    updated = "updated"
    unchanged = "unchanged"


@dataclass
class SubmissionOutcome:
    result: SubmissionResult
    score: Score

    @property
    def changed(self) -> bool:
        return self.result is not SubmissionResult.unchanged


def submit_score(
    session: Session,
    *,
    tournament_id: uuid.UUID,
    user_id: uuid.UUID,
    song_id: uuid.UUID,
    value: Any,
    channel: Any,
    image_reference: Optional[str] = None,
    notifier: Optional[Notifier] = None,
    now: Optional[datetime] = None,
) -> SubmissionOutcome:
    """Validate a submission and write it to the score store."""

    channel = parse_channel(channel)
    if channel is SubmissionChannel.image:
        if not image_reference:
            raise ValidationError("An image is required for image submissions")
        # Placeholder until the organizer enters the real value on approval
        value = 0
    else:
        value = validate_score_value(value)

    tournament = get_tournament(session, tournament_id)
    require_participant(session, tournament.id, user_id)
    song = get_song(session, song_id)
    require_song_in_pool(session, tournament.id, song.id)
    require_channel_allowed(tournament, channel)
    require_open_for_submissions(tournament, now)

    submitted_at = now or utcnow()
    try:
        if channel is SubmissionChannel.image:
            outcome = _create_pending(
                session, tournament, user_id, song, image_reference, submitted_at
            )
        else:
            outcome = _reconcile_direct(
                session, tournament, user_id, song, value, channel, submitted_at
            )
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(
            "Storage failure while saving score for tournament=%s user=%s song=%s",
            tournament_id,
            user_id,
            song_id,
            exc_info=True,
        )
        raise DependencyError("Could not save the score, please try again later") from exc

    logger.info(
        "Score %s: tournament=%s user=%s song=%s channel=%s value=%s",
        outcome.result.value,
        tournament.id,
        user_id,
        song.id,
        channel.value,
        outcome.score.value,
    )

    if outcome.changed and notifier is not None:
        _notify_organizer(session, notifier, tournament, song, user_id, outcome)
    return outcome


def _create_pending(
    session: Session,
    tournament: Tournament,
    user_id: uuid.UUID,
    song: Song,
    image_reference: str,
    submitted_at: datetime,
) -> SubmissionOutcome:
    record = Score(
        tournament_id=tournament.id,
        user_id=user_id,
        song_id=song.id,
        value=0,
        status=ScoreStatus.pending,
        submission_channel=SubmissionChannel.image,
        image_reference=image_reference,
        submitted_at=submitted_at,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    return SubmissionOutcome(SubmissionResult.created, record)


def _reconcile_direct(
    session: Session,
    tournament: Tournament,
    user_id: uuid.UUID,
    song: Song,
    value: int,
    channel: SubmissionChannel,
    submitted_at: datetime,
) -> SubmissionOutcome:
    tournament_id, song_id = tournament.id, song.id

    for attempt in range(1, MAX_RECONCILE_ATTEMPTS + 1):
        existing = find_reconciled_score(session, tournament_id, user_id, song_id)

        if existing is None:
            record = Score(
                tournament_id=tournament_id,
                user_id=user_id,
                song_id=song_id,
                value=value,
                status=ScoreStatus.approved,
                submission_channel=channel,
                submitted_at=submitted_at,
            )
            session.add(record)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.info(
                    "Approved score for tournament=%s user=%s song=%s was inserted "
                    "concurrently; retrying (attempt %d)",
                    tournament_id,
                    user_id,
                    song_id,
                    attempt,
                )
                continue
            session.refresh(record)
            return SubmissionOutcome(SubmissionResult.created, record)

        if value <= existing.value:
            return SubmissionOutcome(SubmissionResult.unchanged, existing)

        result = session.exec(
            update(Score)
            .where(
                Score.id == existing.id,
                Score.status == ScoreStatus.approved,
                Score.value < value,
            )
            .values(value=value, submitted_at=submitted_at, submission_channel=channel)
        )
        if result.rowcount != 1:
            session.rollback()
            logger.info(
                "Score %s changed underneath update; retrying (attempt %d)",
                existing.id,
                attempt,
            )
            continue
        session.commit()
        session.refresh(existing)
        return SubmissionOutcome(SubmissionResult.updated, existing)

    logger.warning(
        "Gave up reconciling score for tournament=%s user=%s song=%s after %d attempts",
        tournament_id,
        user_id,
        song_id,
        MAX_RECONCILE_ATTEMPTS,
    )
    raise ConflictError("The score changed while saving, please submit again")


def _notify_organizer(
    session: Session,
    notifier: Notifier,
    tournament: Tournament,
    song: Song,
    user_id: uuid.UUID,
    outcome: SubmissionOutcome,
) -> None:
    if tournament.organizer_id == user_id:
        return

    name = display_name_for(session, user_id)
    if outcome.score.status is ScoreStatus.pending:
        message = f"{name} submitted an image to “{tournament.title}” ({song.title})"
    else:
        message = (
            f"{name} submitted a score to “{tournament.title}” "
            f"({song.title}: {outcome.score.value})"
        )
    notifier.notify_organizer(tournament, message)


__all__ = [
    "MAX_RECONCILE_ATTEMPTS",
    "SubmissionOutcome",
    "SubmissionResult",
    "submit_score",
]

"""Precondition lookups against tournaments, songs and participants."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from ..core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..core.time import as_utc, utcnow
from ..models import (
    ACCEPTED_CHANNELS,
    Participant,
    Profile,
    Song,
    SubmissionChannel,
    Tournament,
    TournamentSong,
)

DEFAULT_DISPLAY_NAME = "Player"


def get_tournament(session: Session, tournament_id: uuid.UUID) -> Tournament:
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise NotFoundError("Tournament not found")
    return tournament


def get_song(session: Session, song_id: uuid.UUID) -> Song:
    song = session.get(Song, song_id)
    if not song:
        raise NotFoundError("Song not found")
    return song


def is_participant(session: Session, tournament_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    participant = session.exec(
        select(Participant.id).where(
            Participant.tournament_id == tournament_id,
            Participant.user_id == user_id,
        )
    ).first()
    return participant is not None


def require_participant(
    session: Session, tournament_id: uuid.UUID, user_id: uuid.UUID
) -> None:
    if not is_participant(session, tournament_id, user_id):
        raise AuthorizationError("You are not a participant of this tournament")


def require_song_in_pool(
    session: Session, tournament_id: uuid.UUID, song_id: uuid.UUID
) -> None:
    pooled = session.exec(
        select(TournamentSong.id).where(
            TournamentSong.tournament_id == tournament_id,
            TournamentSong.song_id == song_id,
        )
    ).first()
    if pooled is None:
        raise AuthorizationError("This song is not part of the tournament")


def require_organizer(tournament: Tournament, user_id: Optional[uuid.UUID]) -> None:
    if user_id is None or tournament.organizer_id != user_id:
        raise AuthorizationError("Only the tournament organizer can do this")


def require_channel_allowed(tournament: Tournament, channel: SubmissionChannel) -> None:
    if channel not in ACCEPTED_CHANNELS[tournament.submission_method]:
        raise ValidationError(
            f"This tournament does not accept {channel.value} submissions"
        )


def tournament_status(tournament: Tournament, now: Optional[datetime] = None) -> str:
    """Return ``upcoming``, ``active`` or ``ended`` for the half-open window."""

    now = as_utc(now) if now else utcnow()
    if now < as_utc(tournament.start_at):
        return "upcoming"
    if now < as_utc(tournament.end_at):
        return "active"
    return "ended"


def require_open_for_submissions(
    tournament: Tournament, now: Optional[datetime] = None
) -> None:
    status = tournament_status(tournament, now)
    if status != "active":
        raise ConflictError(f"Tournament is {status} and not accepting submissions")


def can_view_ranking(
    session: Session, tournament: Tournament, user_id: Optional[uuid.UUID]
) -> bool:
    if tournament.is_public:
        return True
    if user_id is None:
        return False
    if tournament.organizer_id == user_id:
        return True
    return is_participant(session, tournament.id, user_id)


def display_name_for(session: Session, user_id: uuid.UUID) -> str:
    profile = session.get(Profile, user_id)
    if profile and profile.display_name:
        return profile.display_name
    return DEFAULT_DISPLAY_NAME


__all__ = [
    "DEFAULT_DISPLAY_NAME",
    "can_view_ranking",
    "display_name_for",
    "get_song",
    "get_tournament",
    "is_participant",
    "require_channel_allowed",
    "require_open_for_submissions",
    "require_organizer",
    "require_participant",
    "require_song_in_pool",
    "tournament_status",
]

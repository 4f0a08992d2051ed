"""Database models for tournaments, their song pools and participants."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, CheckConstraint, Column, UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow
from .enums import GameType, SubmissionMethod


class Tournament(SQLModel, table=True):
    """Time-boxed competition over a fixed song pool."""

    __tablename__ = "tournament"
    __table_args__ = (CheckConstraint("start_at < end_at", name="valid_period"),)

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    organizer_id: uuid.UUID = ORMField(foreign_key="profile.id", index=True)
    title: str
    description: Optional[str] = None
    game_type: GameType
    submission_method: SubmissionMethod = SubmissionMethod.both
    start_at: datetime
    end_at: datetime
    is_public: bool = True
    rules: Dict[str, Any] = ORMField(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = ORMField(default_factory=utcnow)


class TournamentSong(SQLModel, table=True):
    """Membership of a song in a tournament's pool."""

    __tablename__ = "tournament_song"
    __table_args__ = (UniqueConstraint("tournament_id", "song_id"),)

    id: Optional[int] = ORMField(default=None, primary_key=True)
    tournament_id: uuid.UUID = ORMField(foreign_key="tournament.id", index=True)
    song_id: uuid.UUID = ORMField(foreign_key="song.id")


class Participant(SQLModel, table=True):
    """A user who joined a tournament."""

    __tablename__ = "participant"
    __table_args__ = (UniqueConstraint("tournament_id", "user_id"),)

    id: Optional[int] = ORMField(default=None, primary_key=True)
    tournament_id: uuid.UUID = ORMField(foreign_key="tournament.id", index=True)
    user_id: uuid.UUID = ORMField(foreign_key="profile.id", index=True)
    joined_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Participant", "Tournament", "TournamentSong"]

"""Database model for the song catalog."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow
from .enums import Difficulty, GameType


class Song(SQLModel, table=True):
    """Chart in a game's catalog, referenced by song pools and scores."""

    __tablename__ = "song"
    __table_args__ = (UniqueConstraint("game_type", "title", "difficulty"),)

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    game_type: GameType
    title: str
    artist: Optional[str] = None
    difficulty: Difficulty
    level: float
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Song"]

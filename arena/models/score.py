"""Database model for score submissions."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Index, text
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow
from .enums import ScoreStatus, SubmissionChannel

MIN_SCORE = 0
MAX_SCORE = 1_010_000

# At most one approved record per (tournament, user, song) among the channels
# the reconciler owns. Organizer-approved image records are not covered.
_RECONCILED_APPROVED = text(
    "status = 'approved' AND submission_channel IN ('manual', 'bookmarklet')"
)


class Score(SQLModel, table=True):
    """One submission attempt for a (tournament, user, song) triple."""

    __tablename__ = "score"
    __table_args__ = (
        CheckConstraint(
            f"value >= {MIN_SCORE} AND value <= {MAX_SCORE}", name="valid_score_value"
        ),
        Index(
            "uq_score_reconciled_approved",
            "tournament_id",
            "user_id",
            "song_id",
            unique=True,
            sqlite_where=_RECONCILED_APPROVED,
            postgresql_where=_RECONCILED_APPROVED,
        ),
        Index("ix_score_tournament_status", "tournament_id", "status"),
    )

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    tournament_id: uuid.UUID = ORMField(foreign_key="tournament.id")
    user_id: uuid.UUID = ORMField(foreign_key="profile.id", index=True)
    song_id: uuid.UUID = ORMField(foreign_key="song.id")
    value: int = 0
    status: ScoreStatus = ScoreStatus.approved
    submission_channel: SubmissionChannel
    image_reference: Optional[str] = None
    submitted_at: datetime = ORMField(default_factory=utcnow)
    approved_at: Optional[datetime] = None
    approved_by: Optional[uuid.UUID] = ORMField(default=None, foreign_key="profile.id")


__all__ = ["MAX_SCORE", "MIN_SCORE", "Score"]

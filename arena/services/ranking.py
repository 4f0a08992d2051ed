"""Tournament ranking over approved scores."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import and_
from sqlmodel import Session, func, select

from ..models import Participant, Profile, Score, ScoreStatus
from .catalog import DEFAULT_DISPLAY_NAME, get_tournament


@dataclass(frozen=True)
class RankingEntry:
    user_id: uuid.UUID
    display_name: str
    total_score: int
    rank: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": str(self.user_id),
            "display_name": self.display_name,
            "total_score": self.total_score,
            "rank": self.rank,
        }


def assign_competition_ranks(
    totals: Iterable[Tuple[uuid.UUID, Optional[str], int]],
) -> List[RankingEntry]:
    """Sort totals descending and rank them so ties share a rank (1, 1, 3)."""

    ordered = sorted(
        totals,
        key=lambda row: (-row[2], (row[1] or DEFAULT_DISPLAY_NAME).lower(), str(row[0])),
    )

    entries: List[RankingEntry] = []
    rank = 0
    previous_total: Optional[int] = None
    for position, (user_id, display_name, total) in enumerate(ordered, start=1):
        if total != previous_total:
            rank = position
            previous_total = total
        entries.append(
            RankingEntry(
                user_id=user_id,
                display_name=display_name or DEFAULT_DISPLAY_NAME,
                total_score=int(total),
                rank=rank,
            )
        )
    return entries


def calculate_ranking(session: Session, tournament_id: uuid.UUID) -> List[RankingEntry]:
    """Compute the ranking of every participant from current approved scores."""

    get_tournament(session, tournament_id)

    total = func.coalesce(func.sum(Score.value), 0)
    rows = session.exec(
        select(Participant.user_id, Profile.display_name, total)
        .join(Profile, Profile.id == Participant.user_id, isouter=True)
        .join(
            Score,
            and_(
                Score.user_id == Participant.user_id,
                Score.tournament_id == Participant.tournament_id,
                Score.status == ScoreStatus.approved,
            ),
            isouter=True,
        )
        .where(Participant.tournament_id == tournament_id)
        .group_by(Participant.user_id, Profile.display_name)
    ).all()

    return assign_competition_ranks(rows)


__all__ = ["RankingEntry", "assign_competition_ranks", "calculate_ranking"]

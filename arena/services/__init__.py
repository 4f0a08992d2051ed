"""Service layer helpers."""

from .approvals import approve_score, correct_score, delete_score, reject_score
from .notifications import Notifier
from .ranking import RankingEntry, assign_competition_ranks, calculate_ranking
from .scores import score_to_dict
from .submissions import SubmissionOutcome, SubmissionResult, submit_score

__all__ = [
    "Notifier",
    "RankingEntry",
    "SubmissionOutcome",
    "SubmissionResult",
    "approve_score",
    "assign_competition_ranks",
    "calculate_ranking",
    "correct_score",
    "delete_score",
    "reject_score",
    "score_to_dict",
    "submit_score",
]

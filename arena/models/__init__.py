"""Database model exports."""

from .enums import (
    ACCEPTED_CHANNELS,
    DIRECT_CHANNELS,
    Difficulty,
    GameType,
    ScoreStatus,
    SubmissionChannel,
    SubmissionMethod,
)
from .notification import Notification
from .profile import Profile
from .score import MAX_SCORE, MIN_SCORE, Score
from .song import Song
from .tournament import Participant, Tournament, TournamentSong

__all__ = [
    "ACCEPTED_CHANNELS",
    "DIRECT_CHANNELS",
    "Difficulty",
    "GameType",
    "MAX_SCORE",
    "MIN_SCORE",
    "Notification",
    "Participant",
    "Profile",
    "Score",
    "ScoreStatus",
    "Song",
    "SubmissionChannel",
    "SubmissionMethod",
    "Tournament",
    "TournamentSong",
]

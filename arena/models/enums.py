"""Enumerations shared by the tournament and score tables."""

from __future__ import annotations

from enum import Enum


class GameType(str, Enum):
    ongeki = "ongeki"
    chunithm = "chunithm"
    maimai = "maimai"


class Difficulty(str, Enum):
    basic = "basic"
    advanced = "advanced"
    expert = "expert"
    master = "master"
    ultima = "ultima"
    world_end = "world_end"


class SubmissionMethod(str, Enum):
    """Which channels a tournament accepts."""

    bookmarklet = "bookmarklet"
    image = "image"
    both = "both"


class SubmissionChannel(str, Enum):
    manual = "manual"
    bookmarklet = "bookmarklet"
    image = "image"


class ScoreStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# Channels whose submissions are trusted without organizer review.
DIRECT_CHANNELS = frozenset({SubmissionChannel.manual, SubmissionChannel.bookmarklet})

ACCEPTED_CHANNELS = {
    SubmissionMethod.bookmarklet: frozenset(
        {SubmissionChannel.manual, SubmissionChannel.bookmarklet}
    ),
    SubmissionMethod.image: frozenset({SubmissionChannel.image}),
    SubmissionMethod.both: frozenset(SubmissionChannel),
}


__all__ = [
    "ACCEPTED_CHANNELS",
    "DIRECT_CHANNELS",
    "Difficulty",
    "GameType",
    "ScoreStatus",
    "SubmissionChannel",
    "SubmissionMethod",
]

"""Shared fixtures: an in-memory database per test and seeded tournaments."""

from __future__ import annotations

import os
import tempfile
from datetime import timedelta
from typing import Iterator, Optional

# Settings are read at import time, so configure them before importing arena.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="arena-uploads-")
os.environ.setdefault("ARENA_LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from arena.api.deps import get_rate_limiter
from arena.app import app
from arena.core import get_session, utcnow
from arena.core.ratelimit import FixedWindowRateLimiter
from arena.models import (
    Difficulty,
    GameType,
    Participant,
    Profile,
    Song,
    SubmissionMethod,
    Tournament,
    TournamentSong,
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def client_factory(session):
    """Build TestClients that share the test session, optionally logged in."""

    limiter = FixedWindowRateLimiter()
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    def factory(display_name: Optional[str] = None) -> TestClient:
        client = TestClient(app)
        if display_name is not None:
            response = client.post("/users/login", json={"display_name": display_name})
            assert response.status_code == 200, response.text
        return client

    yield factory
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory) -> TestClient:
    return client_factory()


# ---------------------------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------------------------


def make_profile(session: Session, display_name: str) -> Profile:
    profile = Profile(display_name=display_name)
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


def make_song(session: Session, title: str = "Song", level: float = 13.5) -> Song:
    song = Song(
        game_type=GameType.chunithm,
        title=title,
        difficulty=Difficulty.master,
        level=level,
    )
    session.add(song)
    session.commit()
    session.refresh(song)
    return song


def make_tournament(
    session: Session,
    organizer: Profile,
    *,
    title: str = "Spring Cup",
    submission_method: SubmissionMethod = SubmissionMethod.both,
    is_public: bool = True,
    songs=(),
    start_offset: timedelta = timedelta(days=-1),
    duration: timedelta = timedelta(days=7),
) -> Tournament:
    start_at = utcnow() + start_offset
    tournament = Tournament(
        organizer_id=organizer.id,
        title=title,
        game_type=GameType.chunithm,
        submission_method=submission_method,
        start_at=start_at,
        end_at=start_at + duration,
        is_public=is_public,
    )
    session.add(tournament)
    session.commit()
    for song in songs:
        session.add(TournamentSong(tournament_id=tournament.id, song_id=song.id))
    session.commit()
    session.refresh(tournament)
    return tournament


def join(session: Session, tournament: Tournament, *profiles: Profile) -> None:
    for profile in profiles:
        session.add(Participant(tournament_id=tournament.id, user_id=profile.id))
    session.commit()


@pytest.fixture
def organizer(session) -> Profile:
    return make_profile(session, "organizer")


@pytest.fixture
def player(session) -> Profile:
    return make_profile(session, "alice")


@pytest.fixture
def song(session) -> Song:
    return make_song(session, "Glorious Crown")


@pytest.fixture
def tournament(session, organizer, player, song) -> Tournament:
    tournament = make_tournament(session, organizer, songs=[song])
    join(session, tournament, player)
    return tournament

"""Ranking computation."""

from __future__ import annotations

import uuid

import pytest

from arena.core.errors import NotFoundError
from arena.services.approvals import reject_score
from arena.services.ranking import assign_competition_ranks, calculate_ranking
from arena.services.submissions import submit_score

from conftest import join, make_profile, make_song, make_tournament


def _submit(session, tournament, profile, song, value, channel="manual", **kwargs):
    return submit_score(
        session,
        tournament_id=tournament.id,
        user_id=profile.id,
        song_id=song.id,
        value=value,
        channel=channel,
        **kwargs,
    ).score


def test_competition_ranks_share_and_skip():
    a, b, c = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()

    entries = assign_competition_ranks([(c, "carol", 800_000), (a, "amy", 1_000_000), (b, "bob", 1_000_000)])

    assert [(e.display_name, e.rank) for e in entries] == [("amy", 1), ("bob", 1), ("carol", 3)]


def test_tied_entries_are_ordered_by_name_then_id():
    low, high = sorted([uuid.uuid4(), uuid.uuid4()], key=str)
    other = uuid.uuid4()

    entries = assign_competition_ranks(
        [(high, "Same", 10), (other, "beta", 10), (low, "same", 10)]
    )

    assert [e.user_id for e in entries] == [other, low, high]
    assert {e.rank for e in entries} == {1}


def test_missing_display_name_falls_back():
    [entry] = assign_competition_ranks([(uuid.uuid4(), None, 0)])
    assert entry.display_name == "Player"
    assert entry.rank == 1


def test_ranking_ties_from_stored_scores(session, organizer, song):
    a = make_profile(session, "ayu")
    b = make_profile(session, "bea")
    c = make_profile(session, "cid")
    tournament = make_tournament(session, organizer, songs=[song])
    join(session, tournament, a, b, c)

    _submit(session, tournament, a, song, 1_000_000)
    _submit(session, tournament, b, song, 1_000_000, "bookmarklet")
    _submit(session, tournament, c, song, 800_000)

    ranking = calculate_ranking(session, tournament.id)

    assert [(e.user_id, e.total_score, e.rank) for e in ranking] == [
        (a.id, 1_000_000, 1),
        (b.id, 1_000_000, 1),
        (c.id, 800_000, 3),
    ]


def test_participant_without_scores_ranks_last_with_zero(session, tournament, player, song):
    idle = make_profile(session, "idle")
    join(session, tournament, idle)
    _submit(session, tournament, player, song, 5)

    ranking = calculate_ranking(session, tournament.id)

    assert ranking[-1].user_id == idle.id
    assert ranking[-1].total_score == 0
    assert ranking[-1].rank == 2


def test_only_approved_scores_count(session, tournament, organizer, player, song):
    _submit(session, tournament, player, song, 400_000)
    _submit(session, tournament, player, song, None, "image", image_reference="p.png")
    rejected = _submit(session, tournament, player, song, None, "image", image_reference="r.png")
    reject_score(session, score_id=rejected.id, organizer_id=organizer.id)

    [entry] = calculate_ranking(session, tournament.id)

    assert entry.total_score == 400_000


def test_totals_sum_across_songs_within_one_tournament(session, organizer, player, song):
    second = make_song(session, "Second Song")
    tournament = make_tournament(session, organizer, songs=[song, second])
    elsewhere = make_tournament(session, organizer, title="Elsewhere", songs=[song])
    join(session, tournament, player)
    join(session, elsewhere, player)

    _submit(session, tournament, player, song, 900_000)
    _submit(session, tournament, player, second, 950_000)
    _submit(session, elsewhere, player, song, 1_000_000)

    [entry] = calculate_ranking(session, tournament.id)

    assert entry.total_score == 1_850_000
    assert entry.display_name == "alice"


def test_ranking_without_participants_is_empty(session, organizer):
    tournament = make_tournament(session, organizer)
    assert calculate_ranking(session, tournament.id) == []


def test_ranking_of_unknown_tournament(session):
    with pytest.raises(NotFoundError):
        calculate_ranking(session, uuid.uuid4())


def test_entry_serialization(session, tournament, player, song):
    _submit(session, tournament, player, song, 42)

    [entry] = calculate_ranking(session, tournament.id)

    assert entry.to_dict() == {
        "user_id": str(player.id),
        "display_name": "alice",
        "total_score": 42,
        "rank": 1,
    }

"""HTTP surface of the score service."""

from __future__ import annotations

import uuid
from datetime import timedelta

from arena.api.deps import get_rate_limiter
from arena.app import app
from arena.core import config
from arena.core.ratelimit import RateLimitDecision
from arena.models import Score, ScoreStatus, SubmissionChannel

from conftest import join, make_profile, make_tournament


def _payload(tournament, song, score, **extra):
    return {"tournament_id": str(tournament.id), "song_id": str(song.id), "score": score, **extra}


def test_health(client):
    assert client.get("/health").json() == {"ok": True}
    assert client.get("/healthz").status_code == 200


def test_config_exposes_score_range(client):
    body = client.get("/config").json()
    assert body["score_range"] == [0, 1_010_000]
    assert body["bookmarklet_enabled"] is True


def test_login_and_me(client_factory):
    anonymous = client_factory()
    assert anonymous.get("/me").json() == {"user": None}

    client = client_factory("newcomer")
    me = client.get("/me").json()["user"]
    assert me["display_name"] == "newcomer"

    client.post("/auth/logout")
    assert client.get("/me").json() == {"user": None}


def test_login_requires_display_name(client):
    response = client.post("/users/login", json={"display_name": "  "})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ValidationError"


def test_submission_requires_authentication(client, tournament, song):
    response = client.post("/scores", json=_payload(tournament, song, 1000))

    assert response.status_code == 401
    assert response.json() == {
        "error": {"code": "AuthenticationError", "message": "Authentication required"}
    }


def test_manual_submission_created_then_kept(client_factory, tournament, player, song):
    client = client_factory("alice")

    first = client.post("/scores", json=_payload(tournament, song, 900_000))
    assert first.status_code == 201
    assert first.json()["result"] == "created"
    assert first.json()["score"]["submitted_via"] == "manual"

    lower = client.post("/scores", json=_payload(tournament, song, 850_000))
    assert lower.status_code == 200
    assert lower.json()["result"] == "unchanged"
    assert lower.json()["score"]["score"] == 900_000

    higher = client.post("/scores", json=_payload(tournament, song, "950000"))
    assert higher.status_code == 201
    assert higher.json()["result"] == "updated"
    assert higher.json()["score"]["id"] == first.json()["score"]["id"]


def test_manual_endpoint_refuses_image_channel(client_factory, tournament, player, song):
    client = client_factory("alice")

    response = client.post("/scores", json=_payload(tournament, song, 1, submitted_via="image"))

    assert response.status_code == 400


def test_malformed_identifiers(client_factory, tournament, player, song):
    client = client_factory("alice")

    response = client.post(
        "/scores", json={"tournament_id": "nope", "song_id": str(song.id), "score": 1}
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ValidationError"

    missing = client.post(
        "/scores",
        json={"tournament_id": str(tournament.id), "song_id": str(uuid.uuid4()), "score": 1},
    )
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "NotFoundError"


def test_out_of_range_score(client_factory, tournament, player, song):
    client = client_factory("alice")

    response = client.post("/scores", json=_payload(tournament, song, 2_000_000))

    assert response.status_code == 400
    assert "1,010,000" in response.json()["error"]["message"]


def test_outsider_and_closed_window(client_factory, session, organizer, tournament, player, song):
    outsider = client_factory("mallory")
    assert outsider.post("/scores", json=_payload(tournament, song, 1)).status_code == 403

    finished = make_tournament(
        session, organizer, title="Finished", songs=[song], start_offset=timedelta(days=-9)
    )
    join(session, finished, player)
    response = client_factory("alice").post("/scores", json=_payload(finished, song, 1))
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ConflictError"


def test_bookmarklet_submission(client_factory, tournament, player, song):
    client = client_factory("alice")

    response = client.post("/api/bookmarklet/submit", json=_payload(tournament, song, 1_001_234))

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["score"]["submitted_via"] == "bookmarklet"


def test_bookmarklet_can_be_disabled(client_factory, tournament, player, song, monkeypatch):
    monkeypatch.setattr(config, "BOOKMARKLET_ENABLED", False)
    client = client_factory("alice")

    response = client.post("/api/bookmarklet/submit", json=_payload(tournament, song, 1))

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "ServiceUnavailable"


def test_rate_limited_submission(client_factory, tournament, player, song):
    client = client_factory("alice")

    class Deny:
        def check(self, key, rule):
            return RateLimitDecision(False, 0, 42)

        def reset(self, key):
            pass

    app.dependency_overrides[get_rate_limiter] = lambda: Deny()

    response = client.post("/scores", json=_payload(tournament, song, 1))

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "42"
    assert response.json()["error"]["code"] == "RateLimited"


def test_image_upload_review_flow(client_factory, session, tournament, organizer, player, song):
    alice = client_factory("alice")
    alice.post("/scores", json=_payload(tournament, song, 900_000))

    upload = alice.post(
        "/scores/image",
        data={"tournament_id": str(tournament.id), "song_id": str(song.id)},
        files={"image": ("result.png", b"\x89PNG fake bytes", "image/png")},
    )
    assert upload.status_code == 201, upload.text
    pending = upload.json()["score"]
    assert pending["status"] == "pending"
    assert pending["score"] == 0
    reference = pending["image_reference"]
    assert reference.startswith(f"{tournament.id}/{player.id}/{song.id}_")
    assert reference.endswith(".png")

    served = alice.get(f"/uploads/{reference}")
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake bytes"

    org = client_factory("organizer")
    queue = org.get(f"/tournaments/{tournament.id}/scores/pending").json()["scores"]
    assert [s["id"] for s in queue] == [pending["id"]]
    assert alice.get(f"/tournaments/{tournament.id}/scores/pending").status_code == 403

    assert alice.patch(
        f"/scores/{pending['id']}/approve", json={"status": "approved", "score": 1}
    ).status_code == 403

    approved = org.patch(
        f"/scores/{pending['id']}/approve", json={"status": "approved", "score": 920_000}
    )
    assert approved.status_code == 200
    assert approved.json()["score"]["approved_by"] == str(organizer.id)

    again = org.patch(f"/scores/{pending['id']}/approve", json={"status": "rejected"})
    assert again.status_code == 409

    ranking = alice.get(f"/tournaments/{tournament.id}/ranking").json()["rankings"]
    assert ranking == [
        {"user_id": str(player.id), "display_name": "alice", "total_score": 1_820_000, "rank": 1}
    ]

    mine = alice.get(f"/tournaments/{tournament.id}/scores/me").json()["scores"]
    assert len(mine) == 2


def test_image_upload_rejects_non_images(client_factory, tournament, player, song):
    client = client_factory("alice")

    response = client.post(
        "/scores/image",
        data={"tournament_id": str(tournament.id), "song_id": str(song.id)},
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400


def test_failed_image_submission_removes_file(client_factory, session, organizer, song):
    # Joined nowhere, so the submission fails after the file is stored.
    tournament = make_tournament(session, organizer, songs=[song])
    client = client_factory("stranger")

    response = client.post(
        "/scores/image",
        data={"tournament_id": str(tournament.id), "song_id": str(song.id)},
        files={"image": ("shot.jpg", b"jpeg", "image/jpeg")},
    )

    assert response.status_code == 403
    user_dir = config.UPLOAD_DIR / str(tournament.id)
    assert not any(p.is_file() for p in user_dir.rglob("*"))


def test_review_requires_valid_status(client_factory, session, tournament, organizer, player, song):
    score = Score(
        tournament_id=tournament.id,
        user_id=player.id,
        song_id=song.id,
        status=ScoreStatus.pending,
        submission_channel=SubmissionChannel.image,
        image_reference="x.png",
    )
    session.add(score)
    session.commit()

    response = client_factory("organizer").patch(
        f"/scores/{score.id}/approve", json={"status": "maybe"}
    )

    assert response.status_code == 400


def test_organizer_correct_and_delete(client_factory, tournament, organizer, player, song):
    alice = client_factory("alice")
    created = alice.post("/scores", json=_payload(tournament, song, 700_000)).json()["score"]
    org = client_factory("organizer")

    corrected = org.patch(f"/scores/{created['id']}/update", json={"score": 690_000})
    assert corrected.json()["ok"] is True
    assert corrected.json()["score"]["score"] == 690_000

    assert alice.delete(f"/scores/{created['id']}").status_code == 403
    deleted = org.delete(f"/scores/{created['id']}")
    assert deleted.json() == {"ok": True, "deleted_score": created["id"]}
    assert org.delete(f"/scores/{created['id']}").status_code == 404


def test_private_ranking_visibility(client_factory, session, organizer, player, song):
    private = make_tournament(session, organizer, title="Invite Only", is_public=False, songs=[song])
    join(session, private, player)
    url = f"/tournaments/{private.id}/ranking"

    assert client_factory().get(url).status_code == 401
    assert client_factory("outsider").get(url).status_code == 403
    assert client_factory("alice").get(url).status_code == 200
    assert client_factory("organizer").get(url).status_code == 200


def test_public_ranking_is_open(client, tournament, player):
    response = client.get(f"/tournaments/{tournament.id}/ranking")

    assert response.status_code == 200
    assert response.json()["rankings"][0]["total_score"] == 0


def test_ranking_unknown_tournament(client):
    response = client.get(f"/tournaments/{uuid.uuid4()}/ranking")
    assert response.status_code == 404


def test_recalculate_is_organizer_only(client_factory, tournament, player):
    assert client_factory("alice").post(f"/tournaments/{tournament.id}/recalculate").status_code == 403

    response = client_factory("organizer").post(f"/tournaments/{tournament.id}/recalculate")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["ranking"][0]["user_id"] == str(player.id)


def test_notifications_inbox(client_factory, session, tournament, organizer, player, song):
    client_factory("alice").post("/scores", json=_payload(tournament, song, 900_000))
    make_profile(session, "bystander")
    org = client_factory("organizer")

    inbox = org.get("/notifications").json()["notifications"]
    assert len(inbox) == 1
    note = inbox[0]
    assert note["is_read"] is False
    assert note["link"] == f"/my/tournaments/{tournament.id}/manage"

    assert client_factory("bystander").patch(f"/notifications/{note['id']}").status_code == 403

    marked = org.patch(f"/notifications/{note['id']}")
    assert marked.json()["notification"]["is_read"] is True
    assert org.get("/notifications", params={"unread_only": True}).json()["notifications"] == []
    assert org.patch("/notifications/9999").status_code == 404

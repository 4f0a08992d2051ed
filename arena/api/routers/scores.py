"""Score submission and review endpoints."""

from __future__ import annotations

import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse, JSONResponse
from sqlmodel import Session

from ...core import get_session
from ...core.errors import ValidationError
from ...services.approvals import approve_score, correct_score, delete_score, reject_score
from ...services.catalog import get_tournament, require_organizer
from ...services.images import discard_image, resolve_image_path, store_score_image
from ...services.notifications import Notifier
from ...services.scores import list_pending_scores, list_user_scores, score_to_dict
from ...services.submissions import SubmissionOutcome, SubmissionResult, submit_score
from ...services.validation import parse_uuid
from ..deps import current_user_id, get_notifier, rate_limit

router = APIRouter(tags=["scores"])

_MESSAGES = {
    SubmissionResult.created: "Score submitted",
    SubmissionResult.updated: "Score updated with your new best",
    SubmissionResult.unchanged: "Your existing score is higher, so it was kept",
}


def outcome_response(outcome: SubmissionOutcome, **extra: Any) -> JSONResponse:
    """Render a reconciliation outcome (201 on a write, 200 on a no-op)."""

    return JSONResponse(
        {
            "message": _MESSAGES[outcome.result],
            "result": outcome.result.value,
            "score": score_to_dict(outcome.score),
            **extra,
        },
        status_code=201 if outcome.changed else 200,
    )


@router.post("/scores")
def submit(
    body: Dict[str, Any],
    user_id: uuid.UUID = Depends(current_user_id),
    _: None = Depends(rate_limit("score_submission")),
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    """Submit a manual or bookmarklet score."""

    channel = body.get("submitted_via") or "manual"
    if channel == "image":
        raise ValidationError("Image submissions must be uploaded to /scores/image")

    outcome = submit_score(
        session,
        tournament_id=parse_uuid(body.get("tournament_id"), "tournament_id"),
        user_id=user_id,
        song_id=parse_uuid(body.get("song_id"), "song_id"),
        value=body.get("score"),
        channel=channel,
        notifier=notifier,
    )
    return outcome_response(outcome)


@router.post("/scores/image")
async def submit_image(
    tournament_id: str = Form(...),
    song_id: str = Form(...),
    image: UploadFile = File(...),
    user_id: uuid.UUID = Depends(current_user_id),
    _: None = Depends(rate_limit("image_upload")),
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    """Upload a result screenshot for organizer review."""

    parsed_tournament = parse_uuid(tournament_id, "tournament_id")
    parsed_song = parse_uuid(song_id, "song_id")
    data = await image.read()

    reference = store_score_image(
        tournament_id=parsed_tournament,
        user_id=user_id,
        song_id=parsed_song,
        filename=image.filename,
        content_type=image.content_type,
        data=data,
    )
    try:
        outcome = submit_score(
            session,
            tournament_id=parsed_tournament,
            user_id=user_id,
            song_id=parsed_song,
            value=None,
            channel="image",
            image_reference=reference,
            notifier=notifier,
        )
    except Exception:
        discard_image(reference)
        raise

    return JSONResponse(
        {
            "message": "Image submitted. Waiting for organizer approval.",
            "result": outcome.result.value,
            "score": score_to_dict(outcome.score),
        },
        status_code=201,
    )


@router.patch("/scores/{score_id}/approve")
def review(
    score_id: str,
    body: Dict[str, Any],
    user_id: uuid.UUID = Depends(current_user_id),
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    """Approve (with the organizer-read value) or reject a pending submission."""

    parsed_id = parse_uuid(score_id, "score id")
    status = body.get("status")
    if status == "approved":
        score = approve_score(
            session,
            score_id=parsed_id,
            organizer_id=user_id,
            value=body.get("score"),
            notifier=notifier,
        )
        message = "Score approved"
    elif status == "rejected":
        score = reject_score(
            session, score_id=parsed_id, organizer_id=user_id, notifier=notifier
        )
        message = "Score rejected"
    else:
        raise ValidationError("status must be 'approved' or 'rejected'")

    return {"message": message, "score": score_to_dict(score)}


@router.patch("/scores/{score_id}/update")
def update_value(
    score_id: str,
    body: Dict[str, Any],
    user_id: uuid.UUID = Depends(current_user_id),
    session: Session = Depends(get_session),
):
    """Correct the value of an approved score."""

    score = correct_score(
        session,
        score_id=parse_uuid(score_id, "score id"),
        organizer_id=user_id,
        value=body.get("score"),
    )
    return {"ok": True, "score": score_to_dict(score)}


@router.delete("/scores/{score_id}")
def remove(
    score_id: str,
    user_id: uuid.UUID = Depends(current_user_id),
    session: Session = Depends(get_session),
):
    parsed_id = parse_uuid(score_id, "score id")
    delete_score(session, score_id=parsed_id, organizer_id=user_id)
    return {"ok": True, "deleted_score": str(parsed_id)}


@router.get("/tournaments/{tournament_id}/scores/me")
def my_scores(
    tournament_id: str,
    user_id: uuid.UUID = Depends(current_user_id),
    session: Session = Depends(get_session),
):
    """List the caller's submissions in a tournament, newest first."""

    tournament = get_tournament(session, parse_uuid(tournament_id, "tournament_id"))
    scores = list_user_scores(session, tournament.id, user_id)
    return {"tournament_id": str(tournament.id), "scores": [score_to_dict(s) for s in scores]}


@router.get("/tournaments/{tournament_id}/scores/pending")
def pending_scores(
    tournament_id: str,
    user_id: uuid.UUID = Depends(current_user_id),
    session: Session = Depends(get_session),
):
    """List submissions awaiting review, oldest first."""

    tournament = get_tournament(session, parse_uuid(tournament_id, "tournament_id"))
    require_organizer(tournament, user_id)
    scores = list_pending_scores(session, tournament.id)
    return {"tournament_id": str(tournament.id), "scores": [score_to_dict(s) for s in scores]}


@router.get("/uploads/{path:path}")
def serve_upload(path: str):
    """Serve stored evidence images."""

    return FileResponse(resolve_image_path(path))


__all__ = ["outcome_response", "router"]

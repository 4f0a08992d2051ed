"""Session identity endpoints.

Accounts are keyed by display name only; a production deploy is expected to
put a real identity provider in front and populate ``session["uid"]``.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session, select

from ...core import get_session, isoformat
from ...core.errors import ValidationError
from ...models import Profile
from ..deps import optional_user_id

router = APIRouter(tags=["users"])

MAX_DISPLAY_NAME = 50


def _profile_to_dict(profile: Profile) -> Dict[str, Any]:
    return {
        "id": str(profile.id),
        "display_name": profile.display_name,
        "created_at": isoformat(profile.created_at),
    }


@router.post("/users/login")
def login_user(
    body: Dict[str, Any], request: Request, session: Session = Depends(get_session)
):
    """Login or register a profile by display name."""

    name = (body.get("display_name") or "").strip()
    if not name:
        raise ValidationError("Display name is required")
    if len(name) > MAX_DISPLAY_NAME:
        raise ValidationError(f"Display name must be {MAX_DISPLAY_NAME} characters or less")

    profile = session.exec(select(Profile).where(Profile.display_name == name)).first()
    if not profile:
        profile = Profile(display_name=name)
        session.add(profile)
        session.commit()
        session.refresh(profile)

    request.session["uid"] = str(profile.id)
    return _profile_to_dict(profile)


@router.post("/auth/logout")
def auth_logout(request: Request):
    request.session.clear()
    return JSONResponse({"ok": True})


@router.get("/me")
def me(
    user_id: Optional[uuid.UUID] = Depends(optional_user_id),
    session: Session = Depends(get_session),
):
    if user_id is None:
        return JSONResponse({"user": None})
    profile = session.get(Profile, user_id)
    return {"user": _profile_to_dict(profile)}


__all__ = ["router"]

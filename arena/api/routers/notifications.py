"""Notification inbox endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...core import get_session
from ...services.notifications import list_notifications, mark_read, notification_to_dict
from ..deps import current_user_id

router = APIRouter(tags=["notifications"])


@router.get("/notifications")
def get_notifications(
    limit: int = 20,
    unread_only: bool = False,
    user_id: uuid.UUID = Depends(current_user_id),
    session: Session = Depends(get_session),
):
    notifications = list_notifications(
        session, user_id, limit=limit, unread_only=unread_only
    )
    return {"notifications": [notification_to_dict(n) for n in notifications]}


@router.patch("/notifications/{notification_id}")
def read_notification(
    notification_id: int,
    user_id: uuid.UUID = Depends(current_user_id),
    session: Session = Depends(get_session),
):
    notification = mark_read(session, notification_id, user_id)
    return {"notification": notification_to_dict(notification)}


__all__ = ["router"]

"""In-app notification delivery.

Delivery is fire-and-forget: a failed notification is logged and dropped so
it never aborts the score operation that triggered it.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from ..core.errors import AuthorizationError, NotFoundError
from ..core.log import get_logger
from ..core.time import isoformat
from ..models import Notification, Tournament

logger = get_logger("notifications")

MAX_NOTIFICATION_PAGE = 100


class Notifier:
    """Persists notifications as rows in the ``notification`` table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def send(
        self,
        recipient_id: uuid.UUID,
        message: str,
        *,
        tournament_id: Optional[uuid.UUID] = None,
        link: Optional[str] = None,
    ) -> bool:
        try:
            self._session.add(
                Notification(
                    user_id=recipient_id,
                    message=message,
                    tournament_id=tournament_id,
                    link=link,
                )
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("Failed to deliver notification to %s", recipient_id, exc_info=True)
            return False
        return True

    def notify_organizer(self, tournament: Tournament, message: str) -> bool:
        return self.send(
            tournament.organizer_id,
            message,
            tournament_id=tournament.id,
            link=f"/my/tournaments/{tournament.id}/manage",
        )

    def notify_player(
        self, user_id: uuid.UUID, tournament: Tournament, message: str
    ) -> bool:
        return self.send(
            user_id,
            message,
            tournament_id=tournament.id,
            link=f"/tournaments/{tournament.id}",
        )


def list_notifications(
    session: Session,
    user_id: uuid.UUID,
    *,
    limit: int = 20,
    unread_only: bool = False,
) -> List[Notification]:
    limit = max(1, min(limit, MAX_NOTIFICATION_PAGE))
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712
    query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return list(session.exec(query).all())


def mark_read(session: Session, notification_id: int, user_id: uuid.UUID) -> Notification:
    notification = session.get(Notification, notification_id)
    if not notification:
        raise NotFoundError("Notification not found")
    if notification.user_id != user_id:
        raise AuthorizationError("Cannot modify another user's notification")
    if not notification.is_read:
        notification.is_read = True
        session.add(notification)
        session.commit()
        session.refresh(notification)
    return notification


def notification_to_dict(notification: Notification) -> Dict[str, Any]:
    return {
        "id": notification.id,
        "message": notification.message,
        "tournament_id": str(notification.tournament_id) if notification.tournament_id else None,
        "link": notification.link,
        "is_read": notification.is_read,
        "created_at": isoformat(notification.created_at),
    }


__all__ = [
    "Notifier",
    "list_notifications",
    "mark_read",
    "notification_to_dict",
]

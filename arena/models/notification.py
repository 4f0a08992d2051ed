"""Database model for in-app notifications."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Notification(SQLModel, table=True):
    __tablename__ = "notification"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    user_id: uuid.UUID = ORMField(foreign_key="profile.id", index=True)
    message: str
    tournament_id: Optional[uuid.UUID] = ORMField(default=None, foreign_key="tournament.id")
    link: Optional[str] = None
    is_read: bool = False
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Notification"]

"""Database model for player and organizer profiles."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from ..core.time import utcnow


class Profile(SQLModel, table=True):
    """Account identity supplied by the auth layer."""

    __tablename__ = "profile"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    display_name: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utcnow)


__all__ = ["Profile"]

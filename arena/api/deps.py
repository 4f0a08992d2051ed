"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

import uuid
from typing import Callable, Optional

from fastapi import Depends, Request
from sqlmodel import Session

from ..core import get_session
from ..core.errors import AuthenticationError, RateLimitedError
from ..core.ratelimit import RATE_LIMITS, FixedWindowRateLimiter, RateLimiter
from ..models import Profile
from ..services.notifications import Notifier

_rate_limiter = FixedWindowRateLimiter()


def optional_user_id(
    request: Request, session: Session = Depends(get_session)
) -> Optional[uuid.UUID]:
    """Resolve the signed-in profile from the session cookie, if any."""

    uid = request.session.get("uid")
    if not uid:
        return None
    try:
        user_id = uuid.UUID(str(uid))
    except (ValueError, TypeError):
        request.session.clear()
        return None
    if not session.get(Profile, user_id):
        request.session.clear()
        return None
    return user_id


def current_user_id(
    user_id: Optional[uuid.UUID] = Depends(optional_user_id),
) -> uuid.UUID:
    if user_id is None:
        raise AuthenticationError("Authentication required")
    return user_id


def get_notifier(session: Session = Depends(get_session)) -> Notifier:
    return Notifier(session)


def get_rate_limiter() -> RateLimiter:
    return _rate_limiter


def rate_limit(bucket: str) -> Callable[..., None]:
    """Build a dependency that throttles the caller within ``bucket``."""

    rule = RATE_LIMITS[bucket]

    def dependency(
        user_id: uuid.UUID = Depends(current_user_id),
        limiter: RateLimiter = Depends(get_rate_limiter),
    ) -> None:
        decision = limiter.check(f"{bucket}:user:{user_id}", rule)
        if not decision.allowed:
            raise RateLimitedError(
                "Too many requests, please try again later",
                headers={"Retry-After": str(decision.retry_after)},
            )

    return dependency


__all__ = [
    "current_user_id",
    "get_notifier",
    "get_rate_limiter",
    "optional_user_id",
    "rate_limit",
]

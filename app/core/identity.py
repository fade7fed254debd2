"""Anonymous user identity carried in a cookie.

Visitors have no accounts: the first request that needs an identity mints a
random UUID and the response stores it in an httpOnly cookie. Services only
ever see the resulting opaque string.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from fastapi import Request, Response

from app.core.config import settings


@dataclass(frozen=True)
class UserIdentity:
    """Resolved caller identity.

    Attributes:
        user_id: Opaque identifier used to key quota and gallery records.
        is_new: True when the id was minted for this request (no cookie sent).
    """

    user_id: str
    is_new: bool


def generate_user_id() -> str:
    return str(uuid.uuid4())


def resolve_user(request: Request) -> UserIdentity:
    """FastAPI dependency reading the user cookie or minting a new id."""
    user_id = request.cookies.get(settings.app.user_cookie_name)
    if user_id:
        return UserIdentity(user_id=user_id, is_new=False)
    return UserIdentity(user_id=generate_user_id(), is_new=True)


def remember_user(response: Response, identity: UserIdentity) -> None:
    """Set the user cookie on the response when the id was just minted."""
    if not identity.is_new:
        return
    response.set_cookie(
        settings.app.user_cookie_name,
        identity.user_id,
        max_age=settings.app.user_cookie_max_age_seconds,
        httponly=True,
        secure=settings.app.secure_cookies or settings.is_production,
        samesite="lax",
    )

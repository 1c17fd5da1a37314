"""Request dependencies: the authenticated caller."""
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from cowork.config import settings
from cowork.errors import Unauthenticated
from cowork.security import verify_token


@dataclass(frozen=True)
class CallerIdentity:
    id: int
    email: str


def get_current_caller(request: Request) -> CallerIdentity:
    token: Optional[str] = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        raise Unauthenticated()

    try:
        payload = verify_token(token)
    except ValueError:
        raise Unauthenticated("Invalid or expired token") from None

    user_id = payload.get("id")
    if user_id is None:
        raise Unauthenticated("Invalid authentication payload")
    return CallerIdentity(id=int(user_id), email=payload.get("email", ""))

# Shared FastAPI dependencies: who is calling, and may they act as admin.
# Identity comes from a bearer JWT issued by tapify.core.security.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from tapify.core.errors import AuthorizationError
from tapify.core.security import decode_access_token


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/token", auto_error=False)


@dataclass(frozen=True)
class Actor:
    user_id: str
    email: Optional[str] = None
    is_admin: bool = False


def get_current_actor(token: Optional[str] = Depends(oauth2_scheme)) -> Actor:
    if not token:
        raise AuthorizationError()
    try:
        payload = decode_access_token(token)
    except JWTError as exc:
        raise AuthorizationError("Invalid or expired token") from exc
    subject = payload.get("sub")
    if not subject:
        raise AuthorizationError("Invalid or expired token")
    return Actor(
        user_id=str(subject),
        email=payload.get("email"),
        is_admin=bool(payload.get("is_admin", False)),
    )


def require_admin():
    def _dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        if not actor.is_admin:
            raise AuthorizationError("Admin privileges required", status_code=403)
        return actor

    return _dependency

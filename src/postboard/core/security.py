"""Session identity helpers built on signed JWT session tokens.

Session issuance (admin login, cookie handling) lives upstream. This module
only turns a presented token into an explicit :class:`AuthContext` that is
passed into every gateway call.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from postboard.core.errors import AuthorizationError
from postboard.core.settings import settings
from postboard.db.time import utcnow

SESSION_TOKEN_TTL = timedelta(days=30)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller for a single request."""

    session_id: str
    is_admin: bool = False


def create_session_token(
    session_id: str,
    *,
    is_admin: bool = False,
    expires_in: timedelta = SESSION_TOKEN_TTL,
) -> str:
    """Return a signed session token for ``session_id``.

    Args:
        session_id: Opaque, unguessable identifier for the browsing session.
        is_admin: Whether the session has been authenticated as the admin.
        expires_in: Lifetime of the token.
    """
    payload: dict[str, Any] = {
        "sub": session_id,
        "adm": is_admin,
        "exp": utcnow() + expires_in,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> AuthContext:
    """Decode a session token into an :class:`AuthContext`.

    Raises:
        AuthorizationError: If the token is malformed, expired or has no subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise AuthorizationError(
            "Could not validate session",
            "invalid_session",
            authenticated=False,
        ) from err

    subject = payload.get("sub")
    if not subject:
        raise AuthorizationError(
            "Could not validate session",
            "invalid_session",
            authenticated=False,
        )
    return AuthContext(session_id=str(subject), is_admin=bool(payload.get("adm", False)))

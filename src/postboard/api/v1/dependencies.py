"""Shared API dependencies for session identity and the moderation gateway."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from postboard.core.errors import AuthorizationError
from postboard.core.security import AuthContext, decode_session_token
from postboard.db.session import get_db
from postboard.services.gateway import ModerationGateway
from postboard.services.mailer import CommentNotifier, get_comment_mailer

# Visitors without a session token may still read; auto_error is handled per route.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AuthContext | None:
    """Return the caller's session identity, or None when no token was sent.

    Raises:
        AuthorizationError: If a token was sent but cannot be validated.
    """
    if credentials is None:
        return None
    return decode_session_token(credentials.credentials)


def get_auth_context(
    ctx: Annotated[AuthContext | None, Depends(get_optional_auth_context)],
) -> AuthContext:
    """Return the caller's session identity, requiring one to be present."""
    if ctx is None:
        raise AuthorizationError("A session is required", "session_required", authenticated=False)
    return ctx


def get_notifier() -> CommentNotifier:
    """Return the notifier used for comments awaiting moderation."""
    return get_comment_mailer()


def get_gateway(
    db: SessionDep,
    notifier: Annotated[CommentNotifier, Depends(get_notifier)],
) -> ModerationGateway:
    """Build a gateway bound to the request's database session."""
    return ModerationGateway(db, notifier=notifier)


OptionalAuthDep = Annotated[AuthContext | None, Depends(get_optional_auth_context)]
AuthDep = Annotated[AuthContext, Depends(get_auth_context)]
GatewayDep = Annotated[ModerationGateway, Depends(get_gateway)]

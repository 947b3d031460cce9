"""Error taxonomy shared by the moderation and engagement services."""

from __future__ import annotations


class PostboardError(RuntimeError):
    """Base error raised by Postboard services.

    Carries a human readable ``message`` and a stable machine ``code`` that the
    HTTP layer echoes back to clients.
    """

    default_code = "postboard_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class ValidationError(PostboardError):
    """A required field is missing, empty or out of range."""

    default_code = "validation_error"


class NotFoundError(PostboardError):
    """The referenced comment or post does not exist."""

    default_code = "not_found"


class AuthorizationError(PostboardError):
    """The caller's session is missing or lacks the admin flag."""

    default_code = "not_authorized"

    def __init__(
        self,
        message: str = "Admin session required",
        code: str | None = None,
        *,
        authenticated: bool = True,
    ) -> None:
        super().__init__(message, code)
        # False when no valid session was presented at all.
        self.authenticated = authenticated


class StorageError(PostboardError):
    """The underlying database failed; nothing from the operation was applied."""

    default_code = "storage_error"

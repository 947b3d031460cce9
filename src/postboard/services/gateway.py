"""Moderation gateway: the entry point the request layer calls into.

The gateway enforces admin-only access, sequences compound actions (a
moderation change followed by its audit entry) and reports secondary
failures as warnings on an :class:`Outcome` instead of raising them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from postboard.core.errors import AuthorizationError, StorageError
from postboard.core.security import AuthContext
from postboard.core.settings import Settings, settings
from postboard.db.transaction import atomic
from postboard.models import ActivityEntry, Comment
from postboard.models.activity import (
    ACTION_APPROVE_COMMENT,
    ACTION_DELETE_COMMENT,
    ACTION_REJECT_COMMENT,
    TARGET_COMMENT,
)
from postboard.services.activity import ActivityLog
from postboard.services.comments import CommentStore
from postboard.services.likes import LikeLedger, LikeToggle
from postboard.services.mailer import CommentNotifier, NotificationError
from postboard.services.pending import PendingNotifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Actor recorded when an admin session carries no usable identifier.
FALLBACK_ACTOR = "admin"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a gateway call plus any non-fatal warnings."""

    value: T
    warnings: tuple[str, ...] = ()

    @property
    def clean(self) -> bool:
        return not self.warnings


@dataclass(frozen=True)
class PurgeResult:
    """Rows removed when a post's engagement data is purged."""

    post_id: str
    comments_removed: int
    likes_removed: int


class ModerationGateway:
    """Orchestrates the comment store, like ledger and activity log."""

    def __init__(
        self,
        db: Session,
        *,
        config: Settings = settings,
        notifier: CommentNotifier | None = None,
    ) -> None:
        self.db = db
        self.config = config
        self.notifier = notifier
        self.comments = CommentStore(db, anonymous_author=config.anonymous_author)
        self.likes = LikeLedger(db)
        self.activity = ActivityLog(db, max_limit=config.activity_max_limit)
        self.pending = PendingNotifier(self.comments)

    # ------------------------------------------------------------------
    # Public comment operations
    # ------------------------------------------------------------------

    def submit_comment(
        self,
        post_id: str,
        author: str | None,
        body: str | None,
    ) -> Outcome[Comment]:
        """Store a visitor comment, notifying the admin when it needs review."""
        moderation_enabled = self.config.moderate_comments
        comment = self.comments.submit(post_id, author, body, moderation_enabled)

        warnings: tuple[str, ...] = ()
        if moderation_enabled and self.notifier is not None:
            try:
                self.notifier.notify_pending_comment(post_id, comment.author, comment.body)
            except NotificationError as exc:
                logger.warning("Pending comment notification failed for %s: %s", comment.id, exc)
                warnings = ("Admin notification could not be sent",)
        return Outcome(comment, warnings)

    def list_public_comments(self, post_id: str) -> list[Comment]:
        return self.comments.list_public(post_id)

    def flag_comment(self, comment_id: str) -> Comment:
        return self.comments.increment_flag(comment_id)

    # ------------------------------------------------------------------
    # Admin comment operations
    # ------------------------------------------------------------------

    def list_pending_comments(self, ctx: AuthContext | None) -> list[Comment]:
        self._require_admin(ctx)
        return self.comments.list_pending()

    def list_all_comments(self, ctx: AuthContext | None) -> list[Comment]:
        self._require_admin(ctx)
        return self.comments.list_all()

    def approve_comment(self, ctx: AuthContext | None, comment_id: str) -> Outcome[Comment]:
        """Approve a comment and audit the action.

        Approving an approved comment still writes an audit entry.
        """
        admin = self._require_admin(ctx)
        comment = self.comments.approve(comment_id)
        return Outcome(comment, self._audit(admin, ACTION_APPROVE_COMMENT, comment))

    def reject_comment(self, ctx: AuthContext | None, comment_id: str) -> Outcome[Comment]:
        admin = self._require_admin(ctx)
        removed = self.comments.reject(comment_id)
        return Outcome(removed, self._audit(admin, ACTION_REJECT_COMMENT, removed))

    def delete_comment(self, ctx: AuthContext | None, comment_id: str) -> Outcome[Comment]:
        admin = self._require_admin(ctx)
        removed = self.comments.delete(comment_id)
        return Outcome(removed, self._audit(admin, ACTION_DELETE_COMMENT, removed))

    def pending_comment_count(self, ctx: AuthContext | None) -> int:
        self._require_admin(ctx)
        return self.pending.pending_count()

    def recent_activity(
        self,
        ctx: AuthContext | None,
        limit: int | None = None,
        *,
        widget: bool = False,
    ) -> list[ActivityEntry]:
        """Newest audit entries for the admin feed or the polled dashboard widget."""
        self._require_admin(ctx)
        if limit is None:
            limit = self.config.activity_widget_limit if widget else self.config.activity_feed_limit
        return self.activity.recent(limit)

    # ------------------------------------------------------------------
    # Likes
    # ------------------------------------------------------------------

    def toggle_like(self, ctx: AuthContext | None, post_id: str) -> LikeToggle:
        session = self._require_session(ctx)
        return self.likes.toggle(post_id, session.session_id)

    def like_status(self, ctx: AuthContext | None, post_id: str) -> bool:
        session = self._require_session(ctx)
        return self.likes.status(post_id, session.session_id)

    def like_count_for(self, post_id: str) -> int:
        return self.likes.count_for(post_id)

    # ------------------------------------------------------------------
    # Post collaborator hooks
    # ------------------------------------------------------------------

    def purge_post(self, ctx: AuthContext | None, post_id: str) -> PurgeResult:
        """Remove every comment and like fact of a post that is being destroyed."""
        self._require_admin(ctx)
        with atomic(self.db, "purge post engagement"):
            comments_removed = self.comments.delete_for_post(post_id)
            likes_removed = self.likes.purge_post(post_id)
        logger.info(
            "Purged post %s: %d comments, %d likes",
            post_id,
            comments_removed,
            likes_removed,
        )
        return PurgeResult(post_id, comments_removed, likes_removed)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_session(ctx: AuthContext | None) -> AuthContext:
        if ctx is None or not ctx.session_id:
            raise AuthorizationError(
                "A session is required",
                "session_required",
                authenticated=False,
            )
        return ctx

    @staticmethod
    def _require_admin(ctx: AuthContext | None) -> AuthContext:
        if ctx is None:
            raise AuthorizationError(authenticated=False)
        if not ctx.is_admin:
            raise AuthorizationError()
        return ctx

    def _audit(self, admin: AuthContext, action: str, comment: Comment) -> tuple[str, ...]:
        try:
            self.activity.record(
                admin.session_id or FALLBACK_ACTOR,
                action,
                TARGET_COMMENT,
                comment.id,
                {"author": comment.author},
            )
        except StorageError as exc:
            logger.warning("Audit entry for %s on comment %s was lost: %s", action, comment.id, exc)
            return (f"Activity log entry for {action} was not recorded",)
        return ()

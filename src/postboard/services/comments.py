"""Comment store: visitor submissions and the approval state machine."""

from __future__ import annotations

import logging
from uuid import uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from postboard.core.errors import NotFoundError, ValidationError
from postboard.db.time import utcnow
from postboard.db.transaction import atomic, reading
from postboard.models import Comment, Post
from postboard.services.locks import KeyedLock, comment_locks

logger = logging.getLogger(__name__)

DEFAULT_ANONYMOUS_AUTHOR = "Anonymous"


def _detached_copy(comment: Comment) -> Comment:
    """Return a transient copy of ``comment`` that outlives its row."""
    return Comment(
        seq=comment.seq,
        id=comment.id,
        post_id=comment.post_id,
        author=comment.author,
        body=comment.body,
        created_at=comment.created_at,
        approved=comment.approved,
        flags=comment.flags,
    )


class CommentStore:
    """Owns comment records and their approval state.

    A comment starts pending or approved depending on the moderation mode.
    ``approve`` moves a pending comment to approved; ``reject`` and ``delete``
    remove the row for good. Admin checks happen in the gateway, not here.
    """

    def __init__(
        self,
        db: Session,
        *,
        anonymous_author: str = DEFAULT_ANONYMOUS_AUTHOR,
        locks: KeyedLock = comment_locks,
    ) -> None:
        self.db = db
        self.anonymous_author = anonymous_author
        self._locks = locks

    def submit(
        self,
        post_id: str,
        author: str | None,
        body: str | None,
        moderation_enabled: bool,
    ) -> Comment:
        """Create a comment on ``post_id``.

        Args:
            post_id: Post the comment belongs to.
            author: Display name; blank names fall back to the anonymous placeholder.
            body: Comment text, required.
            moderation_enabled: When True the comment stays hidden until approved.

        Raises:
            ValidationError: If ``body`` is missing or blank.
            NotFoundError: If the post does not exist.
        """
        if body is None or not body.strip():
            raise ValidationError("Comment body is required", "missing_body")

        with atomic(self.db, "submit comment"):
            if self.db.get(Post, post_id) is None:
                raise NotFoundError("Post not found", "post_not_found")
            comment = Comment(
                id=uuid4().hex,
                post_id=post_id,
                author=(author or "").strip() or self.anonymous_author,
                body=body,
                created_at=utcnow(),
                approved=not moderation_enabled,
                flags=0,
            )
            self.db.add(comment)
            self.db.flush()
            submitted = _detached_copy(comment)

        logger.info(
            "Comment %s submitted on post %s (approved=%s)",
            submitted.id,
            post_id,
            submitted.approved,
        )
        return submitted

    def get(self, comment_id: str) -> Comment:
        """Return the comment with ``comment_id`` or raise NotFoundError."""
        with reading(self.db, "load comment"):
            comment = self.db.execute(
                select(Comment).where(Comment.id == comment_id)
            ).scalar_one_or_none()
        if comment is None:
            raise NotFoundError("Comment not found", "comment_not_found")
        return comment

    def list_public(self, post_id: str) -> list[Comment]:
        """Approved comments on a post, oldest first."""
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id, Comment.approved.is_(True))
            .order_by(Comment.created_at.asc(), Comment.seq.asc())
        )
        with reading(self.db, "list comments"):
            return list(self.db.execute(stmt).scalars())

    def list_pending(self) -> list[Comment]:
        """Comments awaiting approval, newest first."""
        stmt = (
            select(Comment)
            .where(Comment.approved.is_(False))
            .order_by(Comment.created_at.desc(), Comment.seq.desc())
        )
        with reading(self.db, "list pending comments"):
            return list(self.db.execute(stmt).scalars())

    def list_all(self) -> list[Comment]:
        """Every comment regardless of state, newest first."""
        stmt = select(Comment).order_by(Comment.created_at.desc(), Comment.seq.desc())
        with reading(self.db, "list comments"):
            return list(self.db.execute(stmt).scalars())

    def pending_count(self) -> int:
        stmt = select(func.count()).select_from(Comment).where(Comment.approved.is_(False))
        with reading(self.db, "count pending comments"):
            return int(self.db.execute(stmt).scalar_one())

    def approve(self, comment_id: str) -> Comment:
        """Mark a comment approved. Approving an approved comment is a no-op.

        Returns a snapshot taken while the comment was locked, so callers can
        still read it after a concurrent removal of the row.
        """
        with self._locks.hold(comment_id), atomic(self.db, "approve comment"):
            comment = self._get_for_update(comment_id)
            if not comment.approved:
                comment.approved = True
                self.db.flush()
                logger.info("Comment %s approved", comment_id)
            approved = _detached_copy(comment)
        return approved

    def reject(self, comment_id: str) -> Comment:
        """Remove a comment that was awaiting moderation.

        Removal is unconditional: an already approved comment is removed too.
        """
        return self._remove(comment_id, "reject comment")

    def delete(self, comment_id: str) -> Comment:
        """Remove a published comment."""
        return self._remove(comment_id, "delete comment")

    def increment_flag(self, comment_id: str) -> Comment:
        """Count one more visitor abuse report against a comment."""
        with atomic(self.db, "flag comment"):
            result = self.db.execute(
                update(Comment)
                .where(Comment.id == comment_id)
                .values(flags=Comment.flags + 1)
            )
            if result.rowcount == 0:
                raise NotFoundError("Comment not found", "comment_not_found")
        return self.get(comment_id)

    def delete_for_post(self, post_id: str) -> int:
        """Delete every comment on ``post_id`` within the caller's transaction.

        Returns:
            Number of comments removed.
        """
        result = self.db.execute(delete(Comment).where(Comment.post_id == post_id))
        return int(result.rowcount or 0)

    def _get_for_update(self, comment_id: str) -> Comment:
        comment = self.db.execute(
            select(Comment).where(Comment.id == comment_id).with_for_update()
        ).scalar_one_or_none()
        if comment is None:
            raise NotFoundError("Comment not found", "comment_not_found")
        return comment

    def _remove(self, comment_id: str, action: str) -> Comment:
        with self._locks.hold(comment_id), atomic(self.db, action):
            comment = self._get_for_update(comment_id)
            removed = _detached_copy(comment)
            self.db.delete(comment)
        logger.info("Comment %s removed (%s)", comment_id, action)
        return removed

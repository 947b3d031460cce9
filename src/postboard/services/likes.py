"""Like ledger: session-scoped like facts and the cached post counter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from postboard.core.errors import NotFoundError, ValidationError
from postboard.db.time import utcnow
from postboard.db.transaction import atomic, reading
from postboard.models import LikeFact, Post
from postboard.services.locks import KeyedLock, like_locks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeToggle:
    """Ledger state for one (post, session) pair right after a toggle."""

    likes: int
    liked: bool


class LikeLedger:
    """Keeps ``post.likes`` equal to the number of like facts for the post.

    Facts and the counter only ever change together inside one transaction.
    Toggles for the same (post, session) pair are serialized in-process; the
    unique constraint on ``like_fact`` rejects any duplicate that slips past,
    in which case the whole toggle is rolled back.
    """

    def __init__(self, db: Session, *, locks: KeyedLock = like_locks) -> None:
        self.db = db
        self._locks = locks

    def toggle(self, post_id: str, session_id: str) -> LikeToggle:
        """Like the post if this session has not yet, otherwise remove the like.

        Raises:
            ValidationError: If ``session_id`` is empty.
            NotFoundError: If the post does not exist. Nothing is written.
            StorageError: If the write fails. Neither fact nor counter changes.
        """
        if not session_id:
            raise ValidationError("A session is required to like a post", "missing_session")

        with self._locks.hold((post_id, session_id)), atomic(self.db, "toggle like"):
            # Row lock on the post serializes toggles across processes where supported.
            exists = self.db.execute(
                select(Post.id).where(Post.id == post_id).with_for_update()
            ).scalar_one_or_none()
            if exists is None:
                raise NotFoundError("Post not found", "post_not_found")

            existing = self._find(post_id, session_id)
            if existing is not None:
                self.db.delete(existing)
                delta = -1
            else:
                self.db.add(
                    LikeFact(
                        id=uuid4().hex,
                        post_id=post_id,
                        session_id=session_id,
                        created_at=utcnow(),
                    )
                )
                delta = 1
            self.db.flush()

            self.db.execute(
                update(Post)
                .where(Post.id == post_id)
                .values(likes=Post.likes + delta)
                .execution_options(synchronize_session=False)
            )
            likes = self.db.execute(
                select(Post.likes).where(Post.id == post_id)
            ).scalar_one()

        logger.debug("Post %s like toggled by session (delta=%d, likes=%d)", post_id, delta, likes)
        return LikeToggle(likes=int(likes), liked=delta > 0)

    def status(self, post_id: str, session_id: str) -> bool:
        """Return True when ``session_id`` currently likes ``post_id``."""
        with reading(self.db, "read like status"):
            return self._find(post_id, session_id) is not None

    def count_for(self, post_id: str) -> int:
        """Return the cached like counter of a post."""
        with reading(self.db, "read like count"):
            likes = self.db.execute(
                select(Post.likes).where(Post.id == post_id)
            ).scalar_one_or_none()
        if likes is None:
            raise NotFoundError("Post not found", "post_not_found")
        return int(likes)

    def fact_count(self, post_id: str) -> int:
        """Count the like facts stored for a post."""
        stmt = select(func.count()).select_from(LikeFact).where(LikeFact.post_id == post_id)
        with reading(self.db, "count like facts"):
            return int(self.db.execute(stmt).scalar_one())

    def purge_post(self, post_id: str) -> int:
        """Delete every like fact for ``post_id`` within the caller's transaction.

        The counter is reset alongside so it keeps matching the (now empty) ledger.

        Returns:
            Number of like facts removed.
        """
        result = self.db.execute(delete(LikeFact).where(LikeFact.post_id == post_id))
        self.db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(likes=0)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def _find(self, post_id: str, session_id: str) -> LikeFact | None:
        return self.db.execute(
            select(LikeFact).where(
                LikeFact.post_id == post_id,
                LikeFact.session_id == session_id,
            )
        ).scalar_one_or_none()

"""Model for the session-scoped like ledger."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from postboard.db.session import Base
from postboard.db.time import utcnow


class LikeFact(Base):
    """Assertion that a browsing session likes a post."""

    __tablename__ = "like_fact"
    __table_args__ = (
        # At most one fact per (post, session); the ledger relies on this.
        UniqueConstraint("post_id", "session_id", name="uq_like_fact_post_session"),
        Index("ix_like_fact_post_id", "post_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    session_id: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

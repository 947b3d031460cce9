"""Models for visitor comments and their approval state."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from postboard.db.session import Base
from postboard.db.time import utcnow


class Comment(Base):
    """Visitor comment attached to a post.

    A comment is either pending (``approved`` is False) or approved. Rejecting
    or deleting removes the row; there is no soft-deleted state.
    """

    __tablename__ = "comment"
    __table_args__ = (
        CheckConstraint("flags >= 0", name="ck_comment_flags_non_negative"),
        Index("ix_comment_post_id_created_at", "post_id", "created_at"),
        Index("ix_comment_approved", "approved"),
    )

    # Internal insertion sequence; breaks ties between equal timestamps.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    post_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    author: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Visitor abuse reports; informational only.
    flags: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

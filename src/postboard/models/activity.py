"""Models for the administrative activity log."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from postboard.db.session import Base
from postboard.db.time import utcnow

ACTION_APPROVE_COMMENT = "approve_comment"
ACTION_REJECT_COMMENT = "reject_comment"
ACTION_DELETE_COMMENT = "delete_comment"
# Reserved for the post collaborator.
ACTION_PUBLISH_POST = "publish_post"
ACTION_DELETE_POST = "delete_post"

ACTIVITY_ACTIONS = frozenset(
    {
        ACTION_APPROVE_COMMENT,
        ACTION_REJECT_COMMENT,
        ACTION_DELETE_COMMENT,
        ACTION_PUBLISH_POST,
        ACTION_DELETE_POST,
    }
)

TARGET_COMMENT = "comment"
TARGET_POST = "post"


class ActivityEntry(Base):
    """Append-only audit record of a privileged action."""

    __tablename__ = "activity_log"
    __table_args__ = (Index("ix_activity_log_created_at", "created_at"),)

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    actor: Mapped[str] = mapped_column(String(128), nullable=False)
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    target_type: Mapped[str] = mapped_column(String(32), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

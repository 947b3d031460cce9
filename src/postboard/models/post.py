"""SQLAlchemy model for published posts."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from postboard.db.session import Base
from postboard.db.time import utcnow


class Post(Base):
    """Article published by the administrator.

    Publishing and deletion belong to the post collaborator; this service only
    maintains ``likes``, a cached count of the like facts referencing the post.
    """

    __tablename__ = "post"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Local "/uploads/..." path or an object storage URL.
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Derived from like_fact; only LikeLedger writes this column.
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

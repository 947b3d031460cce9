"""SQLAlchemy models for the Postboard application."""

from .activity import ActivityEntry
from .comment import Comment
from .like import LikeFact
from .post import Post

__all__ = [
    "ActivityEntry",
    "Comment",
    "LikeFact",
    "Post",
]

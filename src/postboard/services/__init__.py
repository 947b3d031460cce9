"""Service layer for moderation and engagement."""

from .activity import ActivityLog
from .comments import CommentStore
from .gateway import ModerationGateway, Outcome, PurgeResult
from .likes import LikeLedger, LikeToggle
from .pending import PendingNotifier

__all__ = [
    "ActivityLog",
    "CommentStore",
    "LikeLedger",
    "LikeToggle",
    "ModerationGateway",
    "Outcome",
    "PendingNotifier",
    "PurgeResult",
]

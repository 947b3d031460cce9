"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .activity import ActivityEntryResponse
from .comment import (
    CommentCreate,
    CommentResponse,
    CommentStatusFilter,
    CommentSubmitResponse,
    ModerationOutcomeResponse,
    PendingCountResponse,
)
from .like import LikeCountResponse, LikeStatusResponse, LikeToggleResponse, PurgeResponse

__all__ = [
    "ActivityEntryResponse",
    "CommentCreate", "CommentResponse", "CommentStatusFilter", "CommentSubmitResponse",
    "ModerationOutcomeResponse", "PendingCountResponse",
    "LikeCountResponse", "LikeStatusResponse", "LikeToggleResponse", "PurgeResponse",
]

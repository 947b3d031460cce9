"""Like-related Pydantic schemas."""

from pydantic import BaseModel


class LikeToggleResponse(BaseModel):
    """State of the ledger after a toggle."""

    likes: int
    liked: bool


class LikeStatusResponse(BaseModel):
    """Whether the caller's session likes a post, plus the post's counter."""

    post_id: str
    likes: int
    liked: bool


class LikeCountResponse(BaseModel):
    """Cached like counter for a post."""

    post_id: str
    likes: int


class PurgeResponse(BaseModel):
    """Rows removed by the post cascade hook."""

    post_id: str
    comments_removed: int
    likes_removed: int

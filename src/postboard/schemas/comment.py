"""Comment-related Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from postboard.db.time import as_utc


class CommentStatusFilter(str, Enum):
    """Which comments the admin moderation listing returns."""

    UNAPPROVED = "unapproved"
    ALL = "all"


class CommentCreate(BaseModel):
    """Schema for a visitor submitting a comment."""

    author: str | None = Field(default=None, max_length=120)
    # Emptiness is checked by the comment store so it maps to a ValidationError.
    body: str | None = Field(default=None, max_length=10_000)


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    post_id: str
    author: str
    body: str
    created_at: datetime
    approved: bool
    flags: int

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class CommentSubmitResponse(CommentResponse):
    """A freshly submitted comment plus warnings such as a failed admin email."""

    warnings: list[str] = Field(default_factory=list)


class ModerationOutcomeResponse(BaseModel):
    """Result of an admin moderation action.

    ``warnings`` lists secondary failures, such as an audit entry that could
    not be written, that did not undo the action itself.
    """

    ok: bool = True
    comment: CommentResponse | None = None
    warnings: list[str] = Field(default_factory=list)


class PendingCountResponse(BaseModel):
    """Number of comments awaiting moderation."""

    count: int

"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .likes import router as likes_router
from .moderation import router as moderation_router

__all__ = [
    "comments_router",
    "likes_router",
    "moderation_router",
]

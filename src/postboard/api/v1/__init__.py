"""Version 1 API endpoints."""

from .endpoints import comments_router, likes_router, moderation_router

__all__ = [
    "comments_router",
    "likes_router",
    "moderation_router",
]

"""Like endpoints scoped to the visitor's browsing session."""

from fastapi import APIRouter

from postboard.api.v1.dependencies import AuthDep, GatewayDep, OptionalAuthDep
from postboard.schemas.like import LikeCountResponse, LikeStatusResponse, LikeToggleResponse

router = APIRouter(tags=["likes"])


@router.post("/posts/{post_id}/like", response_model=LikeToggleResponse)
def toggle_like(post_id: str, ctx: AuthDep, gateway: GatewayDep) -> LikeToggleResponse:
    """Like the post, or remove the like if this session already liked it."""
    toggle = gateway.toggle_like(ctx, post_id)
    return LikeToggleResponse(likes=toggle.likes, liked=toggle.liked)


@router.get("/posts/{post_id}/like", response_model=LikeStatusResponse)
def like_status(post_id: str, ctx: OptionalAuthDep, gateway: GatewayDep) -> LikeStatusResponse:
    """Return the post's like counter and whether this session likes it."""
    likes = gateway.like_count_for(post_id)
    liked = gateway.like_status(ctx, post_id) if ctx is not None else False
    return LikeStatusResponse(post_id=post_id, likes=likes, liked=liked)


@router.get("/posts/{post_id}/likes/count", response_model=LikeCountResponse)
def like_count(post_id: str, gateway: GatewayDep) -> LikeCountResponse:
    """Return the cached like counter of a post."""
    return LikeCountResponse(post_id=post_id, likes=gateway.like_count_for(post_id))

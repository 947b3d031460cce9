"""Admin moderation queue, pending badge and activity feed endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from postboard.api.v1.dependencies import AuthDep, GatewayDep
from postboard.schemas.activity import ActivityEntryResponse
from postboard.schemas.comment import CommentResponse, CommentStatusFilter, PendingCountResponse
from postboard.schemas.like import PurgeResponse

router = APIRouter(tags=["moderation"])


@router.get("/moderation/comments", response_model=list[CommentResponse])
def list_moderation_comments(
    ctx: AuthDep,
    gateway: GatewayDep,
    status: CommentStatusFilter = Query(CommentStatusFilter.UNAPPROVED),
) -> list[CommentResponse]:
    """List comments awaiting approval, or every comment with ``status=all``."""
    if status is CommentStatusFilter.ALL:
        comments = gateway.list_all_comments(ctx)
    else:
        comments = gateway.list_pending_comments(ctx)
    return [CommentResponse.model_validate(comment) for comment in comments]


@router.get("/moderation/pending-count", response_model=PendingCountResponse)
def pending_comment_count(ctx: AuthDep, gateway: GatewayDep) -> PendingCountResponse:
    """Number of comments awaiting approval, for the admin badge."""
    return PendingCountResponse(count=gateway.pending_comment_count(ctx))


@router.get("/admin/activity", response_model=list[ActivityEntryResponse])
def recent_activity(
    ctx: AuthDep,
    gateway: GatewayDep,
    limit: int | None = Query(None, ge=1),
) -> list[ActivityEntryResponse]:
    """Most recent moderation actions, newest first."""
    return [
        ActivityEntryResponse.model_validate(entry)
        for entry in gateway.recent_activity(ctx, limit)
    ]


@router.get("/admin/activity/widget", response_model=list[ActivityEntryResponse])
def activity_widget(ctx: AuthDep, gateway: GatewayDep) -> list[ActivityEntryResponse]:
    """Short activity list polled by the admin dashboard widget."""
    return [
        ActivityEntryResponse.model_validate(entry)
        for entry in gateway.recent_activity(ctx, widget=True)
    ]


@router.delete("/posts/{post_id}/engagement", response_model=PurgeResponse)
def purge_post_engagement(post_id: str, ctx: AuthDep, gateway: GatewayDep) -> PurgeResponse:
    """Drop comments and likes of a post the publisher is destroying."""
    result = gateway.purge_post(ctx, post_id)
    return PurgeResponse(
        post_id=result.post_id,
        comments_removed=result.comments_removed,
        likes_removed=result.likes_removed,
    )

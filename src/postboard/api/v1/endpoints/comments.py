"""Comment endpoints for visitors and the admin moderation actions."""

from fastapi import APIRouter, status

from postboard.api.v1.dependencies import AuthDep, GatewayDep
from postboard.models import Comment
from postboard.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentSubmitResponse,
    ModerationOutcomeResponse,
)
from postboard.services.gateway import Outcome

router = APIRouter(tags=["comments"])


def _outcome_response(outcome: Outcome[Comment]) -> ModerationOutcomeResponse:
    return ModerationOutcomeResponse(
        comment=CommentResponse.model_validate(outcome.value),
        warnings=list(outcome.warnings),
    )


@router.get("/posts/{post_id}/comments", response_model=list[CommentResponse])
def list_public_comments(post_id: str, gateway: GatewayDep) -> list[CommentResponse]:
    """List approved comments on a post, oldest first."""
    return [
        CommentResponse.model_validate(comment)
        for comment in gateway.list_public_comments(post_id)
    ]


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentSubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_comment(
    post_id: str,
    comment_data: CommentCreate,
    gateway: GatewayDep,
) -> CommentSubmitResponse:
    """Submit a comment. It is hidden until approved when moderation is on."""
    outcome = gateway.submit_comment(post_id, comment_data.author, comment_data.body)
    response = CommentSubmitResponse.model_validate(outcome.value)
    return response.model_copy(update={"warnings": list(outcome.warnings)})


@router.post("/comments/{comment_id}/flag", response_model=CommentResponse)
def flag_comment(comment_id: str, gateway: GatewayDep) -> CommentResponse:
    """Report a comment as abusive."""
    return CommentResponse.model_validate(gateway.flag_comment(comment_id))


@router.put("/comments/{comment_id}/approve", response_model=ModerationOutcomeResponse)
def approve_comment(
    comment_id: str,
    ctx: AuthDep,
    gateway: GatewayDep,
) -> ModerationOutcomeResponse:
    """Approve a pending comment (admin only)."""
    return _outcome_response(gateway.approve_comment(ctx, comment_id))


@router.put("/comments/{comment_id}/reject", response_model=ModerationOutcomeResponse)
def reject_comment(
    comment_id: str,
    ctx: AuthDep,
    gateway: GatewayDep,
) -> ModerationOutcomeResponse:
    """Reject and remove a comment (admin only)."""
    return _outcome_response(gateway.reject_comment(ctx, comment_id))


@router.delete("/comments/{comment_id}", response_model=ModerationOutcomeResponse)
def delete_comment(
    comment_id: str,
    ctx: AuthDep,
    gateway: GatewayDep,
) -> ModerationOutcomeResponse:
    """Delete a published comment (admin only)."""
    return _outcome_response(gateway.delete_comment(ctx, comment_id))

"""Tests for the moderation gateway orchestration and access control."""

import pytest

from postboard.core.errors import AuthorizationError, NotFoundError, StorageError
from postboard.core.security import AuthContext
from postboard.models.activity import (
    ACTION_APPROVE_COMMENT,
    ACTION_DELETE_COMMENT,
    ACTION_REJECT_COMMENT,
)
from postboard.services.gateway import ModerationGateway


def test_scenario_a_unmoderated_comment_is_public(gateway, post) -> None:
    outcome = gateway.submit_comment(post.id, "Alice", "Nice post!")

    assert outcome.clean
    assert outcome.value.approved is True
    public = gateway.list_public_comments(post.id)
    assert [(c.author, c.body) for c in public] == [("Alice", "Nice post!")]


def test_scenario_b_moderated_comment_flow(moderated_gateway, admin_ctx, post) -> None:
    comment = moderated_gateway.submit_comment(post.id, "Alice", "Nice post!").value

    assert moderated_gateway.list_public_comments(post.id) == []
    assert [c.id for c in moderated_gateway.list_pending_comments(admin_ctx)] == [comment.id]

    outcome = moderated_gateway.approve_comment(admin_ctx, comment.id)

    assert outcome.clean
    assert [c.id for c in moderated_gateway.list_public_comments(post.id)] == [comment.id]
    entries = [
        e for e in moderated_gateway.recent_activity(admin_ctx, 10)
        if e.action == ACTION_APPROVE_COMMENT and e.target_id == comment.id
    ]
    assert len(entries) == 1
    assert entries[0].details == {"author": "Alice"}
    assert entries[0].actor == admin_ctx.session_id


def test_moderated_submit_notifies_admin(moderated_gateway, notifier, post) -> None:
    moderated_gateway.submit_comment(post.id, None, "Please review")

    assert notifier.calls == [(post.id, "Anonymous", "Please review")]


def test_unmoderated_submit_does_not_notify(gateway, notifier, post) -> None:
    gateway.submit_comment(post.id, "Alice", "hello")
    assert notifier.calls == []


def test_notifier_failure_does_not_fail_submission(
    db_session, moderated_settings, failing_notifier, admin_ctx, post
) -> None:
    gateway = ModerationGateway(db_session, config=moderated_settings, notifier=failing_notifier)

    outcome = gateway.submit_comment(post.id, "Alice", "hello")

    assert len(outcome.warnings) == 1
    assert gateway.pending_comment_count(admin_ctx) == 1


def test_approve_twice_audits_twice(gateway, admin_ctx, post) -> None:
    """Re-approving succeeds and still adds exactly one entry per call."""
    comment = gateway.submit_comment(post.id, "Alice", "hello").value

    gateway.approve_comment(admin_ctx, comment.id)
    assert len(gateway.recent_activity(admin_ctx, 10)) == 1
    outcome = gateway.approve_comment(admin_ctx, comment.id)

    assert outcome.value.approved is True
    entries = gateway.recent_activity(admin_ctx, 10)
    assert len(entries) == 2
    assert {e.action for e in entries} == {ACTION_APPROVE_COMMENT}


def test_approve_unknown_comment(gateway, admin_ctx) -> None:
    with pytest.raises(NotFoundError):
        gateway.approve_comment(admin_ctx, "missing")
    assert gateway.recent_activity(admin_ctx, 10) == []


@pytest.mark.parametrize(
    ("method", "action"),
    [("reject_comment", ACTION_REJECT_COMMENT), ("delete_comment", ACTION_DELETE_COMMENT)],
)
def test_removal_is_audited_with_its_label(moderated_gateway, admin_ctx, post, method, action) -> None:
    comment = moderated_gateway.submit_comment(post.id, "Mallory", "spam").value

    outcome = getattr(moderated_gateway, method)(admin_ctx, comment.id)

    assert outcome.value.id == comment.id
    assert moderated_gateway.list_all_comments(admin_ctx) == []
    [entry] = moderated_gateway.recent_activity(admin_ctx, 10)
    assert entry.action == action
    assert entry.target_type == "comment"
    assert entry.target_id == comment.id
    assert entry.details == {"author": "Mallory"}


def test_audit_failure_is_reported_not_raised(gateway, admin_ctx, post, monkeypatch) -> None:
    comment = gateway.submit_comment(post.id, "Alice", "hello").value

    def _broken_record(*args, **kwargs):
        raise StorageError("Could not record activity")

    monkeypatch.setattr(gateway.activity, "record", _broken_record)
    outcome = gateway.delete_comment(admin_ctx, comment.id)

    assert not outcome.clean
    assert "delete_comment" in outcome.warnings[0]
    assert gateway.list_all_comments(admin_ctx) == []


@pytest.mark.parametrize(
    "call",
    [
        lambda g, ctx: g.list_pending_comments(ctx),
        lambda g, ctx: g.list_all_comments(ctx),
        lambda g, ctx: g.approve_comment(ctx, "any"),
        lambda g, ctx: g.reject_comment(ctx, "any"),
        lambda g, ctx: g.delete_comment(ctx, "any"),
        lambda g, ctx: g.pending_comment_count(ctx),
        lambda g, ctx: g.recent_activity(ctx),
        lambda g, ctx: g.purge_post(ctx, "any"),
    ],
)
@pytest.mark.parametrize("ctx", [None, AuthContext(session_id="visitor")])
def test_admin_operations_require_admin(gateway, call, ctx) -> None:
    with pytest.raises(AuthorizationError) as excinfo:
        call(gateway, ctx)
    assert excinfo.value.authenticated is (ctx is not None)


def test_non_admin_cannot_touch_comment(gateway, visitor_ctx, admin_ctx, post) -> None:
    comment = gateway.submit_comment(post.id, "Alice", "hello").value

    with pytest.raises(AuthorizationError):
        gateway.delete_comment(visitor_ctx, comment.id)

    assert [c.id for c in gateway.list_public_comments(post.id)] == [comment.id]
    assert gateway.recent_activity(admin_ctx, 10) == []


def test_flag_is_public(gateway, post) -> None:
    comment = gateway.submit_comment(post.id, "Alice", "hello").value
    assert gateway.flag_comment(comment.id).flags == 1


def test_pending_count_matches_listing(moderated_gateway, admin_ctx, post) -> None:
    for body in ("one", "two", "three"):
        moderated_gateway.submit_comment(post.id, None, body)
    first = moderated_gateway.list_pending_comments(admin_ctx)[0]
    moderated_gateway.approve_comment(admin_ctx, first.id)

    assert moderated_gateway.pending_comment_count(admin_ctx) == 2
    assert moderated_gateway.pending_comment_count(admin_ctx) == len(
        moderated_gateway.list_pending_comments(admin_ctx)
    )


def test_recent_activity_default_limit(gateway, admin_ctx, post, test_settings) -> None:
    for _ in range(test_settings.activity_feed_limit + 2):
        comment = gateway.submit_comment(post.id, "a", "b").value
        gateway.delete_comment(admin_ctx, comment.id)

    assert len(gateway.recent_activity(admin_ctx)) == test_settings.activity_feed_limit
    assert len(gateway.recent_activity(admin_ctx, widget=True)) == test_settings.activity_widget_limit
    assert len(gateway.recent_activity(admin_ctx, 5, widget=True)) == 5


def test_like_operations_use_session(gateway, visitor_ctx, other_visitor_ctx, post) -> None:
    gateway.toggle_like(visitor_ctx, post.id)
    gateway.toggle_like(other_visitor_ctx, post.id)

    assert gateway.like_count_for(post.id) == 2
    assert gateway.like_status(visitor_ctx, post.id) is True

    gateway.toggle_like(visitor_ctx, post.id)

    assert gateway.like_count_for(post.id) == 1
    assert gateway.like_status(visitor_ctx, post.id) is False
    assert gateway.like_status(other_visitor_ctx, post.id) is True


def test_toggle_like_requires_session(gateway, post) -> None:
    with pytest.raises(AuthorizationError):
        gateway.toggle_like(None, post.id)


def test_purge_post_cascades(gateway, admin_ctx, visitor_ctx, make_post) -> None:
    doomed = make_post("P1")
    kept = make_post("P2")
    gateway.submit_comment(doomed.id, "a", "one")
    gateway.submit_comment(doomed.id, "b", "two")
    survivor = gateway.submit_comment(kept.id, "c", "three").value
    gateway.toggle_like(visitor_ctx, doomed.id)
    gateway.toggle_like(visitor_ctx, kept.id)

    result = gateway.purge_post(admin_ctx, doomed.id)

    assert (result.comments_removed, result.likes_removed) == (2, 1)
    assert gateway.list_public_comments(doomed.id) == []
    assert gateway.like_count_for(doomed.id) == 0
    assert gateway.like_status(visitor_ctx, doomed.id) is False
    assert [c.id for c in gateway.list_all_comments(admin_ctx)] == [survivor.id]
    assert gateway.like_count_for(kept.id) == 1

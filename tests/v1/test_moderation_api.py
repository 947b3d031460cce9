# tests/v1/test_moderation_api.py
"""Tests for the moderation queue, pending badge, activity feed and purge hook."""

from fastapi import status


def _submit(client, post_id, body, author=None):
    payload = {"body": body}
    if author is not None:
        payload["author"] = author
    return client.post(f"/api/v1/posts/{post_id}/comments", json=payload).json()


def test_pending_queue_and_badge(client, post, moderation_on, admin_token) -> None:
    first = _submit(client, post.id, "one")
    second = _submit(client, post.id, "two")

    queue = client.get("/api/v1/moderation/comments", headers=admin_token)
    badge = client.get("/api/v1/moderation/pending-count", headers=admin_token)

    assert queue.status_code == status.HTTP_200_OK
    assert [c["id"] for c in queue.json()] == [second["id"], first["id"]]
    assert badge.json() == {"count": 2}

    client.put(f"/api/v1/comments/{first['id']}/approve", headers=admin_token)

    assert client.get("/api/v1/moderation/pending-count", headers=admin_token).json() == {"count": 1}
    everything = client.get(
        "/api/v1/moderation/comments", params={"status": "all"}, headers=admin_token
    ).json()
    assert {c["id"] for c in everything} == {first["id"], second["id"]}


def test_moderation_listing_rejects_unknown_status(client, admin_token) -> None:
    response = client.get(
        "/api/v1/moderation/comments", params={"status": "spam"}, headers=admin_token
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_admin_endpoints_require_admin(client, visitor_token) -> None:
    for path in (
        "/api/v1/moderation/comments",
        "/api/v1/moderation/pending-count",
        "/api/v1/admin/activity",
        "/api/v1/admin/activity/widget",
    ):
        assert client.get(path).status_code == status.HTTP_401_UNAUTHORIZED
        assert client.get(path, headers=visitor_token).status_code == status.HTTP_403_FORBIDDEN


def test_activity_feed_records_moderation(client, post, moderation_on, admin_token) -> None:
    kept = _submit(client, post.id, "keep me", author="Alice")
    dropped = _submit(client, post.id, "drop me", author="Mallory")

    client.put(f"/api/v1/comments/{kept['id']}/approve", headers=admin_token)
    client.put(f"/api/v1/comments/{dropped['id']}/reject", headers=admin_token)

    response = client.get("/api/v1/admin/activity", headers=admin_token)

    assert response.status_code == status.HTTP_200_OK
    entries = response.json()
    assert [(e["action"], e["target_id"]) for e in entries] == [
        ("reject_comment", dropped["id"]),
        ("approve_comment", kept["id"]),
    ]
    assert entries[0]["details"] == {"author": "Mallory"}
    assert entries[0]["actor"] == "admin-session"


def test_activity_feed_limit(client, post, admin_token) -> None:
    for index in range(3):
        created = _submit(client, post.id, f"comment {index}")
        client.delete(f"/api/v1/comments/{created['id']}", headers=admin_token)

    limited = client.get("/api/v1/admin/activity", params={"limit": 2}, headers=admin_token)
    assert len(limited.json()) == 2

    too_large = client.get("/api/v1/admin/activity", params={"limit": 500}, headers=admin_token)
    assert too_large.status_code == status.HTTP_400_BAD_REQUEST

    zero = client.get("/api/v1/admin/activity", params={"limit": 0}, headers=admin_token)
    assert zero.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_activity_widget_uses_short_limit(client, post, admin_token) -> None:
    for index in range(22):
        created = _submit(client, post.id, f"comment {index}")
        client.delete(f"/api/v1/comments/{created['id']}", headers=admin_token)

    widget = client.get("/api/v1/admin/activity/widget", headers=admin_token)
    feed = client.get("/api/v1/admin/activity", headers=admin_token)

    assert widget.status_code == status.HTTP_200_OK
    assert len(widget.json()) == 20
    assert len(feed.json()) == 22
    assert widget.json()[0]["id"] == feed.json()[0]["id"]


def test_purge_post_engagement(client, post, admin_token, visitor_token) -> None:
    _submit(client, post.id, "one")
    _submit(client, post.id, "two")
    client.post(f"/api/v1/posts/{post.id}/like", headers=visitor_token)

    response = client.delete(f"/api/v1/posts/{post.id}/engagement", headers=admin_token)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"post_id": post.id, "comments_removed": 2, "likes_removed": 1}
    assert client.get(f"/api/v1/posts/{post.id}/comments").json() == []
    assert client.get(f"/api/v1/posts/{post.id}/likes/count").json()["likes"] == 0


def test_purge_post_requires_admin(client, post, visitor_token) -> None:
    response = client.delete(f"/api/v1/posts/{post.id}/engagement", headers=visitor_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN

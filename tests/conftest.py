# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from postboard.api.v1.dependencies import get_notifier
from postboard.core.security import AuthContext, create_session_token
from postboard.core.settings import Settings, settings
from postboard.db.session import build_engine, build_session_factory, create_tables, drop_tables
from postboard.db.session import get_db as app_get_session
from postboard.main import app as fastapi_app
from postboard.models import Post
from postboard.services.gateway import ModerationGateway
from postboard.services.mailer import NotificationError

TEST_DB_URL = "sqlite://"

_POST_COUNTER = count(1)


class RecordingNotifier:
    """Notifier double that remembers every pending-comment call."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, str, str]] = []

    def notify_pending_comment(self, post_id: str, author: str, body: str) -> None:
        self.calls.append((post_id, author, body))
        if self.fail:
            raise NotificationError("SMTP server unavailable")


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL)
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    notifier: RecordingNotifier,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_notifier, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def moderation_on(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Switch the shared settings into moderation mode for one test."""
    monkeypatch.setattr(settings, "moderate_comments", True)
    yield


@pytest.fixture()
def test_settings() -> Settings:
    """Settings with moderation disabled, independent of the environment."""
    return Settings(moderate_comments=False)


@pytest.fixture()
def moderated_settings() -> Settings:
    return Settings(moderate_comments=True)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory persisting posts owned by the publishing collaborator."""

    def _make_post(post_id: str | None = None, **fields: Any) -> Post:
        post = Post(
            id=post_id or f"post-{next(_POST_COUNTER)}",
            title=fields.pop("title", "Test post"),
            body=fields.pop("body", "Test post content"),
            **fields,
        )
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def post(make_post: Callable[..., Post]) -> Post:
    """Create a baseline post for tests."""
    return make_post("P1")


@pytest.fixture()
def visitor_ctx() -> AuthContext:
    return AuthContext(session_id="visitor-session-1")


@pytest.fixture()
def other_visitor_ctx() -> AuthContext:
    return AuthContext(session_id="visitor-session-2")


@pytest.fixture()
def admin_ctx() -> AuthContext:
    return AuthContext(session_id="admin-session", is_admin=True)


@pytest.fixture()
def gateway(
    db_session: Session,
    test_settings: Settings,
    notifier: RecordingNotifier,
) -> ModerationGateway:
    return ModerationGateway(db_session, config=test_settings, notifier=notifier)


@pytest.fixture()
def moderated_gateway(
    db_session: Session,
    moderated_settings: Settings,
    notifier: RecordingNotifier,
) -> ModerationGateway:
    return ModerationGateway(db_session, config=moderated_settings, notifier=notifier)


def _bearer(session_id: str, *, is_admin: bool = False) -> dict[str, str]:
    token = create_session_token(session_id, is_admin=is_admin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def visitor_token() -> dict[str, str]:
    """Return authorization headers for an anonymous visitor session."""
    return _bearer("visitor-session-1")


@pytest.fixture()
def other_visitor_token() -> dict[str, str]:
    return _bearer("visitor-session-2")


@pytest.fixture()
def admin_token() -> dict[str, str]:
    """Return authorization headers for an admin session."""
    return _bearer("admin-session", is_admin=True)

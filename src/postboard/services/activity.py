"""Append-only activity log of administrative actions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from postboard.core.errors import ValidationError
from postboard.db.time import utcnow
from postboard.db.transaction import atomic, reading
from postboard.models import ActivityEntry
from postboard.models.activity import ACTIVITY_ACTIONS

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIMIT = 200


class ActivityLog:
    """Writes and reads audit entries.

    Entries are only ever inserted. Each ``record`` call commits on its own so
    a failed audit write cannot undo the action it describes; callers decide
    what to do with the resulting StorageError.
    """

    def __init__(self, db: Session, *, max_limit: int = DEFAULT_MAX_LIMIT) -> None:
        self.db = db
        self.max_limit = max_limit

    def record(
        self,
        actor: str,
        action: str,
        target_type: str,
        target_id: str,
        details: Mapping[str, Any] | None = None,
    ) -> ActivityEntry:
        """Append one entry stamped with the current time.

        Raises:
            ValidationError: If ``action`` is not part of the audit vocabulary.
            StorageError: If the insert fails; nothing is written.
        """
        if action not in ACTIVITY_ACTIONS:
            raise ValidationError(f"Unknown activity action: {action}", "unknown_action")

        entry = ActivityEntry(
            id=uuid4().hex,
            actor=actor,
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=dict(details or {}),
            created_at=utcnow(),
        )
        with atomic(self.db, "record activity"):
            self.db.add(entry)
        logger.debug("Recorded %s on %s %s by %s", action, target_type, target_id, actor)
        return entry

    def recent(self, limit: int) -> list[ActivityEntry]:
        """Return the newest ``limit`` entries, newest first."""
        if limit < 1 or limit > self.max_limit:
            raise ValidationError(
                f"limit must be between 1 and {self.max_limit}",
                "invalid_limit",
            )
        stmt = (
            select(ActivityEntry)
            .order_by(ActivityEntry.created_at.desc(), ActivityEntry.seq.desc())
            .limit(limit)
        )
        with reading(self.db, "list activity"):
            return list(self.db.execute(stmt).scalars())

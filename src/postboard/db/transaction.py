"""Transaction helpers that map database failures onto StorageError."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from postboard.core.errors import PostboardError, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, action: str) -> Iterator[Session]:
    """Run the enclosed block as one unit of work and commit it.

    Any error rolls the whole unit back. Domain errors are re-raised as is;
    SQLAlchemy errors become :class:`StorageError`.

    Args:
        db: Session the block writes through.
        action: Short description used in log lines and error messages.
    """
    try:
        yield db
        db.commit()
    except PostboardError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Storage failure while trying to %s: %s", action, exc)
        raise StorageError(f"Could not {action}") from exc


@contextmanager
def reading(db: Session, action: str) -> Iterator[Session]:
    """Wrap read-only queries so driver failures surface as StorageError."""
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Storage failure while trying to %s: %s", action, exc)
        raise StorageError(f"Could not {action}") from exc

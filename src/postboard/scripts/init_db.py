"""Create or reset the tables used by the Postboard service."""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from postboard.core.settings import settings
from postboard.db.session import create_tables, drop_tables

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the configured database tables")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop every table before creating them again.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())
    try:
        if args.drop_tables:
            drop_tables()
            logger.info("Dropped all tables")
        create_tables()
    except SQLAlchemyError as exc:
        logger.error("Database initialisation failed: %s", exc)
        return 1
    logger.info("Tables ready at %s", settings.effective_database_url)
    return 0


if __name__ == "__main__":
    sys.exit(main())

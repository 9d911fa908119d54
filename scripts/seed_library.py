#!/usr/bin/env python3
"""
Populate the configured database with sample books and users.

Usage:
    python scripts/seed_library.py

Uses DATABASE_URL (or the POSTGRES_* settings) like the API does.
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.infrastructure.library.database import build_engine  # noqa: E402
from app.infrastructure.library.seed import seed  # noqa: E402
from app.shared.logging import configure_logging  # noqa: E402

logger = logging.getLogger(__name__)


def main() -> int:
    configure_logging(level=settings.log_level)
    engine = build_engine(settings.get_database_url())
    try:
        result = seed(engine)
    except SQLAlchemyError:
        logger.exception("Seeding failed")
        return 1
    finally:
        engine.dispose()

    logger.info("Database seeded: %d books, %d users", result.books, result.users)
    return 0


if __name__ == "__main__":
    sys.exit(main())

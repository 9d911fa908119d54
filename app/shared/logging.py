"""
Logging configuration for the application.

One stdout handler with a pipe-separated format for every logger.
Use case and adapter modules log through ``logging.getLogger(__name__)``.
Email addresses and request bodies are never logged.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


def configure_logging(level: str = "INFO", log_sql: bool = False) -> None:
    """Configure application-wide logging.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        log_sql: Emit every SQL statement issued by SQLAlchemy at INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if log_sql:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

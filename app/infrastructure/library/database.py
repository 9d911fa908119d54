"""
Database schema and engine construction for the library context.

Tables are declared with SQLAlchemy Core on a single MetaData so
that the schema can be created at startup and in tests.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
)
from sqlalchemy.engine import Engine

from app.shared.clock import ensure_utc

logger = logging.getLogger(__name__)

metadata = MetaData()

books_table = Table(
    "books",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("isbn", String(32), nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("author", String(255), nullable=False),
    Column("publication_year", Integer, nullable=False),
    Column("category", String(120), nullable=False),
    Column("available_copies", Integer, nullable=False),
    Column("total_copies", Integer, nullable=False),
)

users_table = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(320), nullable=False, unique=True),
    Column("type", String(16), nullable=False),
)

loans_table = Table(
    "loans",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("book_id", String(36), nullable=False, index=True),
    Column("user_id", String(36), nullable=False, index=True),
    Column("loan_date", DateTime(timezone=True), nullable=False),
    Column("expected_return_date", DateTime(timezone=True), nullable=False),
    Column("return_date", DateTime(timezone=True), nullable=True),
    Column("status", String(16), nullable=False, index=True),
    Column("user_type", String(16), nullable=False),
)


def build_engine(database_url: str) -> Engine:
    """Build a SQLAlchemy engine for ``database_url``."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


def create_schema(engine: Engine) -> None:
    """Create any missing library tables."""
    metadata.create_all(engine)
    logger.info("Library schema ready on %s", engine.url.render_as_string(hide_password=True))


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a timestamp read from the database to aware UTC."""
    if value is None:
        return None
    return ensure_utc(value)

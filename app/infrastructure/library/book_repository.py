"""
Adapter: Book repository.

Implements BookRepository port on the ``books`` table.
"""

import logging
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine, Row

from app.domain.library.entities import Book
from app.domain.library.errors import BookNotFoundError
from app.domain.library.ports import BookRepository
from app.domain.library.value_objects import ISBN
from app.infrastructure.library.database import books_table

logger = logging.getLogger(__name__)


def _row_to_book(row: Row) -> Book:
    return Book(
        id=row.id,
        isbn=ISBN(row.isbn),
        title=row.title,
        author=row.author,
        publication_year=row.publication_year,
        category=row.category,
        available_copies=row.available_copies,
        total_copies=row.total_copies,
    )


def _book_to_values(book: Book) -> dict:
    return {
        "isbn": book.isbn.value,
        "title": book.title,
        "author": book.author,
        "publication_year": book.publication_year,
        "category": book.category,
        "available_copies": book.available_copies,
        "total_copies": book.total_copies,
    }


class BookRepositoryAdapter(BookRepository):
    """SQLAlchemy implementation of the book repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def find_by_id(self, book_id: str) -> Optional[Book]:
        query = select(books_table).where(books_table.c.id == book_id)
        with self._engine.connect() as conn:
            row = conn.execute(query).first()
        return _row_to_book(row) if row else None

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        query = select(books_table).where(books_table.c.isbn == isbn)
        with self._engine.connect() as conn:
            row = conn.execute(query).first()
        return _row_to_book(row) if row else None

    def save(self, book: Book) -> Book:
        with self._engine.begin() as conn:
            conn.execute(insert(books_table).values(id=book.id, **_book_to_values(book)))
        logger.debug("Saved book: id=%s", book.id)
        return book

    def update(self, book: Book) -> Book:
        stmt = (
            update(books_table)
            .where(books_table.c.id == book.id)
            .values(**_book_to_values(book))
        )
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        if result.rowcount == 0:
            raise BookNotFoundError()
        logger.debug(
            "Updated book: id=%s available_copies=%d", book.id, book.available_copies
        )
        return book

    def find_all(self) -> list[Book]:
        query = select(books_table).order_by(books_table.c.title)
        with self._engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_book(r) for r in rows]

    def delete(self, book_id: str) -> None:
        with self._engine.begin() as conn:
            result = conn.execute(delete(books_table).where(books_table.c.id == book_id))
        if result.rowcount == 0:
            raise BookNotFoundError()

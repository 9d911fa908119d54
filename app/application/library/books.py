"""
Use cases: Book catalogue management.

Thin orchestration over BookRepository: registration, lookup,
partial update, removal and availability checks.
Failure cases: BookNotFoundError, DomainValidationError.
"""

import logging
from dataclasses import asdict
from uuid import uuid4

from app.application.library.dtos import (
    BookAvailability,
    CreateBookCommand,
    UpdateBookCommand,
)
from app.domain.library.entities import Book
from app.domain.library.errors import BookNotFoundError
from app.domain.library.ports import BookRepository
from app.domain.library.value_objects import ISBN

logger = logging.getLogger(__name__)


class CreateBookUseCase:
    """Registers a new book under a freshly generated id."""

    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def execute(self, command: CreateBookCommand) -> Book:
        book = Book(
            id=str(uuid4()),
            isbn=ISBN.create(command.isbn),
            title=command.title,
            author=command.author,
            publication_year=command.publication_year,
            category=command.category,
            available_copies=command.available_copies,
            total_copies=command.total_copies,
        )
        saved = self._book_repo.save(book)
        logger.info("Book registered: book=%s isbn=%s", saved.id, saved.isbn)
        return saved


class GetBookByIdUseCase:
    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def execute(self, book_id: str) -> Book:
        book = self._book_repo.find_by_id(book_id)
        if book is None:
            raise BookNotFoundError()
        return book


class FindBookByISBNUseCase:
    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def execute(self, isbn: str) -> Book:
        book = self._book_repo.find_by_isbn(isbn)
        if book is None:
            raise BookNotFoundError()
        return book


class ListBooksUseCase:
    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def execute(self) -> list[Book]:
        return self._book_repo.find_all()


class UpdateBookUseCase:
    """Applies a partial update and stores the re-validated book."""

    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def execute(self, command: UpdateBookCommand) -> Book:
        current = self._book_repo.find_by_id(command.book_id)
        if current is None:
            raise BookNotFoundError()

        changes = {
            key: value
            for key, value in asdict(command).items()
            if key != "book_id" and value is not None
        }
        updated = current.update(**changes)
        self._book_repo.update(updated)
        logger.info("Book updated: book=%s fields=%s", updated.id, sorted(changes))
        return updated


class DeleteBookUseCase:
    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def execute(self, book_id: str) -> None:
        self._book_repo.delete(book_id)
        logger.info("Book deleted: book=%s", book_id)


class CheckBookAvailabilityUseCase:
    """Reports how many copies of a book can currently be lent."""

    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def execute(self, book_id: str) -> BookAvailability:
        book = self._book_repo.find_by_id(book_id)
        if book is None:
            raise BookNotFoundError()
        return BookAvailability(
            book_id=book.id,
            title=book.title,
            available_copies=book.available_copies,
            total_copies=book.total_copies,
            is_available=book.has_available_copies(),
        )

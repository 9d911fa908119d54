"""
Port interfaces (ABCs) for the library bounded context.

Ports define the persistence contracts the use cases depend on.
Infrastructure adapters implement these interfaces, and use cases
receive them by constructor injection. The domain layer never
depends on concrete implementations.

Conventions shared by every repository:
    - ``find_by_id`` returns None on absence; callers translate that
      into the aggregate's NotFoundError.
    - ``update`` and ``delete`` raise the aggregate's NotFoundError
      when no row is affected.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from app.domain.library.entities import Book, Loan, User


class BookRepository(ABC):
    """Port for persisting and retrieving books."""

    @abstractmethod
    def find_by_id(self, book_id: str) -> Optional[Book]:
        raise NotImplementedError

    @abstractmethod
    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        raise NotImplementedError

    @abstractmethod
    def save(self, book: Book) -> Book:
        """Insert a new book and return it."""
        raise NotImplementedError

    @abstractmethod
    def update(self, book: Book) -> Book:
        """Replace the stored row for ``book.id``.

        Raises:
            BookNotFoundError: If no row has that id.
        """
        raise NotImplementedError

    @abstractmethod
    def find_all(self) -> list[Book]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, book_id: str) -> None:
        """Delete a book.

        Raises:
            BookNotFoundError: If no row was deleted.
        """
        raise NotImplementedError


class UserRepository(ABC):
    """Port for persisting and retrieving users."""

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """Return the user registered with ``email`` (case-insensitive), or None.

        Absence is not an error: this lookup backs uniqueness checks.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, user: User) -> User:
        raise NotImplementedError

    @abstractmethod
    def update(self, user: User) -> User:
        raise NotImplementedError

    @abstractmethod
    def find_all(self) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, user_id: str) -> None:
        raise NotImplementedError


class LoanRepository(ABC):
    """Port for persisting and retrieving loans."""

    @abstractmethod
    def find_by_id(self, loan_id: str) -> Optional[Loan]:
        raise NotImplementedError

    @abstractmethod
    def find_by_user_id(self, user_id: str) -> list[Loan]:
        raise NotImplementedError

    @abstractmethod
    def find_active_by_user_id(self, user_id: str) -> list[Loan]:
        """Return the user's loans with status ACTIVE."""
        raise NotImplementedError

    @abstractmethod
    def find_overdue_by_user_id(self, user_id: str) -> list[Loan]:
        """Return the user's loans with status OVERDUE."""
        raise NotImplementedError

    @abstractmethod
    def find_by_book_id(self, book_id: str) -> list[Loan]:
        raise NotImplementedError

    @abstractmethod
    def find_active_due_before(self, moment: datetime) -> list[Loan]:
        """Return ACTIVE loans whose expected return date is before ``moment``."""
        raise NotImplementedError

    @abstractmethod
    def save(self, loan: Loan) -> Loan:
        raise NotImplementedError

    @abstractmethod
    def update(self, loan: Loan) -> Loan:
        raise NotImplementedError

    @abstractmethod
    def mark_overdue(self, loan: Loan) -> bool:
        """Store ``loan`` as OVERDUE only if its row is still ACTIVE.

        Returns False, without writing, when the stored loan has already
        left ACTIVE (for example because it was returned meanwhile).
        """
        raise NotImplementedError

    @abstractmethod
    def find_all(self) -> list[Loan]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, loan_id: str) -> None:
        raise NotImplementedError

"""
Data Transfer Objects for the library application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.domain.library.entities import Loan
from app.domain.library.enums import UserType


@dataclass(frozen=True)
class CreateLoanCommand:
    """Input DTO for lending a book.

    Attributes:
        book_id: Identifier of the book to lend.
        user_id: Identifier of the borrower.
        loan_date: When the loan starts. Defaults to now.
    """

    book_id: str
    user_id: str
    loan_date: Optional[datetime] = None


@dataclass(frozen=True)
class ReturnBookCommand:
    """Input DTO for returning a borrowed book.

    Attributes:
        loan_id: Identifier of the loan being closed.
        return_date: When the book came back. Defaults to now.
    """

    loan_id: str
    return_date: Optional[datetime] = None


@dataclass(frozen=True)
class ReturnBookResult:
    """Output DTO for a returned loan and the fine owed on it."""

    loan: Loan
    fine: Decimal


@dataclass(frozen=True)
class MarkOverdueLoansCommand:
    """Input DTO for the overdue sweep.

    Attributes:
        as_of: Loans due before this moment are marked. Defaults to now.
    """

    as_of: Optional[datetime] = None


@dataclass(frozen=True)
class BookAvailability:
    """Output DTO describing how many copies of a book are on the shelf."""

    book_id: str
    title: str
    available_copies: int
    total_copies: int
    is_available: bool


@dataclass(frozen=True)
class CreateBookCommand:
    """Input DTO for registering a book."""

    isbn: str
    title: str
    author: str
    publication_year: int
    category: str
    available_copies: int
    total_copies: int


@dataclass(frozen=True)
class UpdateBookCommand:
    """Input DTO for a partial book update. None means "leave unchanged"."""

    book_id: str
    isbn: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    publication_year: Optional[int] = None
    category: Optional[str] = None
    available_copies: Optional[int] = None
    total_copies: Optional[int] = None


@dataclass(frozen=True)
class CreateUserCommand:
    """Input DTO for registering a user."""

    name: str
    email: str
    type: UserType


@dataclass(frozen=True)
class UpdateUserCommand:
    """Input DTO for a partial user update. None means "leave unchanged"."""

    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    type: Optional[UserType] = None

"""
Domain entities for the library bounded context.

Entities carry identity and enforce their invariants at construction
and through controlled mutation methods. State that must stay
consistent (available copies, loan status, return date) is kept private
and is only changed through methods that check pre-conditions.
They contain no framework imports and no IO operations.
"""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from app.domain.library.enums import LoanStatus, UserType
from app.domain.library.errors import DomainValidationError
from app.domain.library.value_objects import (
    ISBN,
    ONE_DAY,
    Email,
    LoanPeriod,
    overdue_days,
)
from app.shared.clock import ensure_utc, utc_now

MIN_PUBLICATION_YEAR = 1000

MAX_ACTIVE_LOANS = {
    UserType.STUDENT: 3,
    UserType.TEACHER: 5,
    UserType.ADMIN: 10,
}


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _coerce_user_type(value: Union[UserType, str]) -> UserType:
    try:
        return UserType(value)
    except ValueError as exc:
        raise DomainValidationError("Invalid user type") from exc


def _as_utc(value: Optional[datetime]) -> datetime:
    return ensure_utc(value) if value is not None else utc_now()


class Book:
    """A catalogued title and the number of its copies on the shelf."""

    def __init__(
        self,
        id: str,
        isbn: ISBN,
        title: str,
        author: str,
        publication_year: int,
        category: str,
        available_copies: int,
        total_copies: int,
    ) -> None:
        self.id = id
        self.isbn = isbn
        self.title = title
        self.author = author
        self.publication_year = publication_year
        self.category = category
        self._available_copies = available_copies
        self.total_copies = total_copies
        self._validate()

    def _validate(self) -> None:
        if _is_blank(self.title):
            raise DomainValidationError("Book title cannot be empty")
        if _is_blank(self.author):
            raise DomainValidationError("Book author cannot be empty")
        if not MIN_PUBLICATION_YEAR <= self.publication_year <= date.today().year:
            raise DomainValidationError("Invalid publication year")
        if self.total_copies < 0:
            raise DomainValidationError("Total copies cannot be negative")
        if self._available_copies < 0:
            raise DomainValidationError("Available copies cannot be negative")
        if self._available_copies > self.total_copies:
            raise DomainValidationError("Available copies cannot exceed total copies")

    @property
    def available_copies(self) -> int:
        return self._available_copies

    def has_available_copies(self) -> bool:
        return self._available_copies > 0

    def decrease_available_copies(self) -> None:
        if self._available_copies <= 0:
            raise DomainValidationError("No available copies to loan")
        self._available_copies -= 1

    def increase_available_copies(self) -> None:
        if self._available_copies >= self.total_copies:
            raise DomainValidationError(
                "Cannot increase available copies beyond total copies"
            )
        self._available_copies += 1

    def set_available_copies(self, copies: int) -> None:
        if copies < 0 or copies > self.total_copies:
            raise DomainValidationError("Invalid available copies count")
        self._available_copies = copies

    def update(
        self,
        *,
        isbn: Optional[str] = None,
        title: Optional[str] = None,
        author: Optional[str] = None,
        publication_year: Optional[int] = None,
        category: Optional[str] = None,
        available_copies: Optional[int] = None,
        total_copies: Optional[int] = None,
    ) -> "Book":
        """Return a new validated Book with the given fields replaced.

        Fields left as None keep their current value. The ISBN is
        re-parsed when provided.
        """
        return Book(
            id=self.id,
            isbn=ISBN.create(isbn) if isbn else self.isbn,
            title=self.title if title is None else title,
            author=self.author if author is None else author,
            publication_year=(
                self.publication_year if publication_year is None else publication_year
            ),
            category=self.category if category is None else category,
            available_copies=(
                self._available_copies if available_copies is None else available_copies
            ),
            total_copies=self.total_copies if total_copies is None else total_copies,
        )

    def __repr__(self) -> str:
        return (
            f"Book(id={self.id!r}, isbn={self.isbn.value!r}, title={self.title!r}, "
            f"available_copies={self._available_copies}, total_copies={self.total_copies})"
        )


class User:
    """A registered library member."""

    def __init__(
        self,
        id: str,
        name: str,
        email: Email,
        type: Union[UserType, str],
    ) -> None:
        if _is_blank(name):
            raise DomainValidationError("User name cannot be empty")
        self.id = id
        self.name = name
        self.email = email
        self.type = _coerce_user_type(type)

    def get_max_active_loans(self) -> int:
        try:
            return MAX_ACTIVE_LOANS[self.type]
        except KeyError:
            raise DomainValidationError(f"Unknown user type: {self.type}") from None

    def is_student(self) -> bool:
        return self.type == UserType.STUDENT

    def is_teacher(self) -> bool:
        return self.type == UserType.TEACHER

    def is_admin(self) -> bool:
        return self.type == UserType.ADMIN

    def update_user(
        self,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        type: Optional[Union[UserType, str]] = None,
    ) -> "User":
        """Return a new User with name, email or type replaced.

        The email is re-validated when provided.
        """
        return User(
            id=self.id,
            name=self.name if name is None else name,
            email=Email.create(email) if email is not None else self.email,
            type=self.type if type is None else type,
        )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email.value!r}, type={self.type.value})"


class Loan:
    """One copy of a book lent to one user.

    Status transitions: ACTIVE -> RETURNED (``return_book``) and
    ACTIVE -> OVERDUE (``mark_as_overdue``). An OVERDUE loan can still be
    returned. RETURNED is terminal.

    The borrower's type is snapshotted at creation so that the loan
    period and fines do not change if the user is later re-classified.
    """

    FINE_PER_DAY = Decimal("1.5")

    def __init__(
        self,
        id: str,
        book_id: str,
        user_id: str,
        loan_date: datetime,
        expected_return_date: datetime,
        return_date: Optional[datetime],
        status: LoanStatus,
        user_type: Union[UserType, str],
    ) -> None:
        loan_date = ensure_utc(loan_date)
        expected_return_date = ensure_utc(expected_return_date)
        if return_date is not None:
            return_date = ensure_utc(return_date)
        status = LoanStatus(status)

        if loan_date > expected_return_date:
            raise DomainValidationError("Expected return date must be after loan date")
        if return_date is not None and return_date < loan_date:
            raise DomainValidationError("Return date cannot be before loan date")
        if (status == LoanStatus.RETURNED) != (return_date is not None):
            raise DomainValidationError(
                "Return date must be set exactly when the loan is returned"
            )

        self.id = id
        self.book_id = book_id
        self.user_id = user_id
        self.loan_date = loan_date
        self.expected_return_date = expected_return_date
        self._return_date = return_date
        self._status = status
        self._user_type = _coerce_user_type(user_type)

    @classmethod
    def create_new(
        cls,
        id: str,
        book_id: str,
        user_id: str,
        user_type: Union[UserType, str],
        loan_date: Optional[datetime] = None,
    ) -> "Loan":
        """Open an ACTIVE loan due one loan period after ``loan_date``."""
        loan_date = _as_utc(loan_date)
        period = LoanPeriod.for_user_type(_coerce_user_type(user_type))
        return cls(
            id=id,
            book_id=book_id,
            user_id=user_id,
            loan_date=loan_date,
            expected_return_date=period.calculate_expiration_date(loan_date),
            return_date=None,
            status=LoanStatus.ACTIVE,
            user_type=user_type,
        )

    @property
    def return_date(self) -> Optional[datetime]:
        return self._return_date

    @property
    def status(self) -> LoanStatus:
        return self._status

    @property
    def user_type(self) -> UserType:
        return self._user_type

    def is_active(self) -> bool:
        return self._status == LoanStatus.ACTIVE

    def is_returned(self) -> bool:
        return self._status == LoanStatus.RETURNED

    def is_overdue(self, as_of: Optional[datetime] = None) -> bool:
        if self.is_returned():
            return False
        return _as_utc(as_of) > self.expected_return_date

    def mark_as_overdue(self) -> None:
        if self.is_returned():
            raise DomainValidationError("Cannot mark returned loan as overdue")
        self._status = LoanStatus.OVERDUE

    def return_book(self, return_date: Optional[datetime] = None) -> None:
        if self.is_returned():
            raise DomainValidationError("Loan is already returned")
        return_date = _as_utc(return_date)
        if return_date < self.loan_date:
            raise DomainValidationError("Return date cannot be before loan date")
        self._return_date = return_date
        self._status = LoanStatus.RETURNED

    def calculate_fine(self, as_of: Optional[datetime] = None) -> Decimal:
        """Return the overdue fine.

        For a returned loan the fine is fixed by the stored return date
        and ``as_of`` is ignored.
        """
        if self.is_returned() and self._return_date is not None:
            check_date = self._return_date
        else:
            check_date = _as_utc(as_of)
            if not self.is_overdue(check_date):
                return Decimal("0")
        return overdue_days(self.expected_return_date, check_date) * self.FINE_PER_DAY

    def get_days_until_due(self, as_of: Optional[datetime] = None) -> int:
        """Return whole days (rounded up) until the due date; negative once overdue."""
        if self.is_returned():
            return 0
        remaining = self.expected_return_date - _as_utc(as_of)
        return math.ceil(remaining / ONE_DAY)

    def __repr__(self) -> str:
        return (
            f"Loan(id={self.id!r}, book_id={self.book_id!r}, user_id={self.user_id!r}, "
            f"status={self._status.value})"
        )

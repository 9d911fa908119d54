"""
Value objects for the library bounded context.

Value objects are immutable, self-validating wrappers around primitive
data. Construction through ``create`` either returns a valid instance
or raises a DomainValidationError subclass; there is no lenient mode.
"""

import math
import re
import string
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.domain.library.enums import UserType
from app.domain.library.errors import (
    DomainValidationError,
    InvalidEmailError,
    InvalidISBNError,
)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
ISBN_SEPARATORS = re.compile(r"[-\s]")

ONE_DAY = timedelta(days=1)


def overdue_days(expected_return_date: datetime, check_date: datetime) -> int:
    """Return whole days (rounded up) that ``check_date`` lies past the due date.

    Returns 0 when ``check_date`` is on or before the due date.
    """
    if check_date <= expected_return_date:
        return 0
    return math.ceil((check_date - expected_return_date) / ONE_DAY)


@dataclass(frozen=True)
class Email:
    """A lowercase-normalized email address."""

    value: str

    @classmethod
    def create(cls, raw: str) -> "Email":
        """Validate ``raw`` and return it as a normalized Email.

        Raises:
            InvalidEmailError: If ``raw`` is not shaped like local@domain.tld.
        """
        if not cls.is_valid(raw):
            raise InvalidEmailError(raw)
        return cls(raw.lower())

    @staticmethod
    def is_valid(raw: str) -> bool:
        return isinstance(raw, str) and EMAIL_PATTERN.fullmatch(raw) is not None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ISBN:
    """An ISBN-10 or ISBN-13, kept exactly as it was formatted on input."""

    value: str

    @classmethod
    def create(cls, raw: str) -> "ISBN":
        """Validate ``raw`` and wrap it.

        Hyphens and whitespace are ignored for the checksum but preserved
        in the stored value.

        Raises:
            InvalidISBNError: On a wrong length or a failing checksum.
        """
        if not cls.is_valid(raw):
            raise InvalidISBNError(raw)
        return cls(raw)

    @classmethod
    def is_valid(cls, raw: str) -> bool:
        if not isinstance(raw, str):
            return False
        cleaned = ISBN_SEPARATORS.sub("", raw)
        if len(cleaned) == 10:
            return cls._is_valid_isbn10(cleaned)
        if len(cleaned) == 13:
            return cls._is_valid_isbn13(cleaned)
        return False

    @staticmethod
    def _is_valid_isbn10(isbn: str) -> bool:
        body, check = isbn[:9], isbn[9]
        if any(ch not in string.digits for ch in body):
            return False
        total = sum(int(ch) * (10 - i) for i, ch in enumerate(body))

        if check == "X":
            total += 10
        elif check in string.digits:
            total += int(check)
        else:
            return False
        return total % 11 == 0

    @staticmethod
    def _is_valid_isbn13(isbn: str) -> bool:
        if any(ch not in string.digits for ch in isbn):
            return False
        total = sum(
            int(ch) * (1 if i % 2 == 0 else 3) for i, ch in enumerate(isbn[:12])
        )
        return (10 - total % 10) % 10 == int(isbn[12])

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LoanPeriod:
    """Number of days a borrower may keep a book."""

    STUDENT_DAYS = 14
    TEACHER_DAYS = 30

    days: int

    @classmethod
    def for_user_type(cls, user_type: UserType) -> "LoanPeriod":
        """Return the loan period for a borrower category.

        Raises:
            DomainValidationError: If ``user_type`` is not recognized.
        """
        if user_type == UserType.STUDENT:
            return cls(cls.STUDENT_DAYS)
        if user_type in (UserType.TEACHER, UserType.ADMIN):
            return cls(cls.TEACHER_DAYS)
        raise DomainValidationError(f"Unknown user type: {user_type}")

    def calculate_expiration_date(self, start: datetime) -> datetime:
        return start + timedelta(days=self.days)

    def is_overdue(self, loan_date: datetime, current_date: datetime) -> bool:
        return current_date > self.calculate_expiration_date(loan_date)

    def calculate_overdue_days(self, loan_date: datetime, return_date: datetime) -> int:
        return overdue_days(self.calculate_expiration_date(loan_date), return_date)

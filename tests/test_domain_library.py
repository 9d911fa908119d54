"""
Tests for the library domain layer.

Tests value objects, entities, loan rules and error classes in isolation.
No external dependencies or IO required.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.domain.library.entities import Book, Loan, User
from app.domain.library.enums import LoanStatus, UserType
from app.domain.library.errors import (
    BookNotFoundError,
    DomainValidationError,
    InvalidEmailError,
    InvalidISBNError,
    LoanBorrowDeniedError,
    NotFoundError,
)
from app.domain.library.rules import LoanRules
from app.domain.library.value_objects import ISBN, Email, LoanPeriod

JAN_1 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _book(available: int = 3, total: int = 5, **overrides) -> Book:
    fields = {
        "id": "book-1",
        "isbn": ISBN.create("978-0-13-468599-1"),
        "title": "Clean Code",
        "author": "Robert C. Martin",
        "publication_year": 2008,
        "category": "Software Engineering",
        "available_copies": available,
        "total_copies": total,
    }
    fields.update(overrides)
    return Book(**fields)


def _user(user_type: UserType = UserType.STUDENT) -> User:
    return User("user-1", "John Doe", Email.create("john@example.com"), user_type)


def _loan(user_type: UserType = UserType.STUDENT, loan_date: datetime = JAN_1) -> Loan:
    return Loan.create_new("loan-1", "book-1", "user-1", user_type, loan_date)


# ══════════════════════════════════════════════════════════════
# Value objects
# ══════════════════════════════════════════════════════════════


class TestEmail:
    """Tests for the Email value object."""

    def test_normalizes_to_lowercase(self) -> None:
        """Email keeps the lowercase form of its input."""
        assert Email.create("John.Doe@Example.COM").value == "john.doe@example.com"

    def test_case_insensitive_equality(self) -> None:
        """Two emails that differ only in case are equal."""
        assert Email.create("sam@example.com") == Email.create("SAM@EXAMPLE.COM")

    @pytest.mark.parametrize(
        "raw",
        ["plainaddress", "missing-at.example.com", "john@example", "jo hn@example.com", "@example.com", ""],
    )
    def test_rejects_malformed(self, raw: str) -> None:
        with pytest.raises(InvalidEmailError, match="Invalid email format"):
            Email.create(raw)


class TestISBN:
    """Tests for the ISBN value object."""

    @pytest.mark.parametrize(
        "raw",
        [
            "978-0-13-468599-1",
            "9780201633610",
            "978 0 13 235088 4",
            "0-306-40615-2",
            "0-8044-2957-X",
        ],
    )
    def test_accepts_valid_and_keeps_formatting(self, raw: str) -> None:
        assert ISBN.create(raw).value == raw

    @pytest.mark.parametrize(
        "raw",
        [
            "978-0-13-468599-2",  # bad ISBN-13 check digit
            "0-306-40615-3",  # bad ISBN-10 check digit
            "0-8044-2957-x",  # lowercase check character
            "12345",
            "97801346859912",
            "ABCDEFGHIJ",
        ],
    )
    def test_rejects_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidISBNError):
            ISBN.create(raw)

    def test_invalid_isbn_is_a_validation_error(self) -> None:
        with pytest.raises(DomainValidationError):
            ISBN.create("not an isbn")


class TestLoanPeriod:
    """Tests for the LoanPeriod value object."""

    def test_days_per_user_type(self) -> None:
        assert LoanPeriod.for_user_type(UserType.STUDENT).days == 14
        assert LoanPeriod.for_user_type(UserType.TEACHER).days == 30
        assert LoanPeriod.for_user_type(UserType.ADMIN).days == 30

    def test_unknown_user_type(self) -> None:
        with pytest.raises(DomainValidationError, match="Unknown user type"):
            LoanPeriod.for_user_type("LIBRARIAN")

    def test_overdue_days_round_up(self) -> None:
        period = LoanPeriod.for_user_type(UserType.STUDENT)
        due = JAN_1 + timedelta(days=14)
        assert period.calculate_overdue_days(JAN_1, due) == 0
        assert period.calculate_overdue_days(JAN_1, due + timedelta(minutes=1)) == 1
        assert period.calculate_overdue_days(JAN_1, due + timedelta(days=2, hours=1)) == 3
        assert period.is_overdue(JAN_1, due + timedelta(seconds=1))
        assert not period.is_overdue(JAN_1, due)


# ══════════════════════════════════════════════════════════════
# Entities
# ══════════════════════════════════════════════════════════════


class TestBookEntity:
    """Tests for the Book entity."""

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"title": "  "}, "Book title cannot be empty"),
            ({"author": ""}, "Book author cannot be empty"),
            ({"publication_year": 999}, "Invalid publication year"),
            ({"publication_year": datetime.now().year + 1}, "Invalid publication year"),
            ({"total_copies": -1, "available_copies": 0}, "Total copies cannot be negative"),
            ({"available_copies": -1}, "Available copies cannot be negative"),
            ({"available_copies": 6}, "Available copies cannot exceed total copies"),
        ],
    )
    def test_construction_invariants(self, overrides: dict, message: str) -> None:
        with pytest.raises(DomainValidationError, match=message):
            _book(**overrides)

    def test_decrease_until_empty(self) -> None:
        """A full book can be decreased exactly total_copies times."""
        book = _book(available=4, total=4)
        for _ in range(4):
            book.decrease_available_copies()
        assert book.available_copies == 0
        assert not book.has_available_copies()
        with pytest.raises(DomainValidationError, match="No available copies to loan"):
            book.decrease_available_copies()

    def test_increase_capped_at_total(self) -> None:
        book = _book(available=4, total=5)
        book.increase_available_copies()
        with pytest.raises(DomainValidationError, match="beyond total copies"):
            book.increase_available_copies()
        assert book.available_copies == 5

    def test_set_available_copies_bounds(self) -> None:
        book = _book()
        book.set_available_copies(0)
        assert book.available_copies == 0
        with pytest.raises(DomainValidationError, match="Invalid available copies count"):
            book.set_available_copies(6)

    def test_update_returns_new_validated_instance(self) -> None:
        book = _book()
        updated = book.update(title="Clean Code, 2nd ed.", isbn="0-306-40615-2")
        assert updated is not book
        assert updated.title == "Clean Code, 2nd ed."
        assert updated.isbn.value == "0-306-40615-2"
        assert updated.available_copies == book.available_copies
        assert book.title == "Clean Code"

    def test_update_revalidates(self) -> None:
        with pytest.raises(DomainValidationError):
            _book(available=3, total=5).update(total_copies=2)
        with pytest.raises(InvalidISBNError):
            _book().update(isbn="123")


class TestUserEntity:
    """Tests for the User entity."""

    @pytest.mark.parametrize(
        "user_type, cap", [(UserType.STUDENT, 3), (UserType.TEACHER, 5), (UserType.ADMIN, 10)]
    )
    def test_max_active_loans(self, user_type: UserType, cap: int) -> None:
        assert _user(user_type).get_max_active_loans() == cap

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(DomainValidationError, match="User name cannot be empty"):
            User("u", " ", Email.create("a@b.co"), UserType.ADMIN)

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(DomainValidationError, match="Invalid user type"):
            User("u", "Ann", Email.create("a@b.co"), "LIBRARIAN")

    def test_update_user(self) -> None:
        user = _user()
        updated = user.update_user(email="New@Example.com", type=UserType.TEACHER)
        assert updated.id == user.id
        assert updated.name == user.name
        assert updated.email.value == "new@example.com"
        assert updated.is_teacher()
        with pytest.raises(InvalidEmailError):
            user.update_user(email="broken")


class TestLoanEntity:
    """Tests for the Loan entity."""

    @pytest.mark.parametrize(
        "user_type, days",
        [(UserType.STUDENT, 14), (UserType.TEACHER, 30), (UserType.ADMIN, 30)],
    )
    def test_create_new_sets_due_date(self, user_type: UserType, days: int) -> None:
        loan = _loan(user_type)
        assert loan.expected_return_date == JAN_1 + timedelta(days=days)
        assert loan.status == LoanStatus.ACTIVE
        assert loan.return_date is None
        assert loan.user_type == user_type

    def test_loan_date_after_due_date_rejected(self) -> None:
        with pytest.raises(DomainValidationError, match="Expected return date"):
            Loan("l", "b", "u", JAN_1, JAN_1 - timedelta(days=1), None, LoanStatus.ACTIVE, UserType.STUDENT)

    def test_naive_dates_are_read_as_utc(self) -> None:
        """A loan built from naive dates works with the default "now" arguments."""
        loan = Loan.create_new("l", "b", "u", UserType.STUDENT, datetime(2024, 1, 1))

        assert loan.loan_date == JAN_1
        assert loan.expected_return_date == datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert loan.is_overdue()
        assert loan.calculate_fine() > 0
        assert loan.get_days_until_due() < 0
        assert loan.calculate_fine(datetime(2024, 1, 20)) == Decimal("7.5")

        loan.return_book(datetime(2024, 1, 20))
        assert loan.return_date == datetime(2024, 1, 20, tzinfo=timezone.utc)
        assert loan.calculate_fine() == Decimal("7.5")

    def test_rehydrated_return_before_loan_date_rejected(self) -> None:
        with pytest.raises(DomainValidationError, match="before loan date"):
            Loan(
                "l", "b", "u", JAN_1, JAN_1 + timedelta(days=14),
                JAN_1 - timedelta(days=1), LoanStatus.RETURNED, UserType.STUDENT,
            )

    @pytest.mark.parametrize(
        "return_date, status",
        [
            (None, LoanStatus.RETURNED),
            (JAN_1 + timedelta(days=3), LoanStatus.ACTIVE),
            (JAN_1 + timedelta(days=3), LoanStatus.OVERDUE),
        ],
    )
    def test_return_date_must_match_returned_status(self, return_date, status) -> None:
        with pytest.raises(DomainValidationError, match="exactly when the loan is returned"):
            Loan(
                "l", "b", "u", JAN_1, JAN_1 + timedelta(days=14),
                return_date, status, UserType.STUDENT,
            )

    def test_return_book(self) -> None:
        loan = _loan()
        returned_at = JAN_1 + timedelta(days=3)
        loan.return_book(returned_at)
        assert loan.is_returned()
        assert loan.return_date == returned_at
        assert not loan.is_overdue(JAN_1 + timedelta(days=100))

    def test_return_twice_rejected(self) -> None:
        loan = _loan()
        loan.return_book(JAN_1 + timedelta(days=1))
        with pytest.raises(DomainValidationError, match="Loan is already returned"):
            loan.return_book(JAN_1 + timedelta(days=2))
        assert loan.return_date == JAN_1 + timedelta(days=1)

    def test_return_before_loan_date_rejected(self) -> None:
        with pytest.raises(DomainValidationError, match="before loan date"):
            _loan().return_book(JAN_1 - timedelta(seconds=1))

    def test_mark_as_overdue(self) -> None:
        loan = _loan()
        loan.mark_as_overdue()
        assert loan.status == LoanStatus.OVERDUE
        loan.return_book(JAN_1 + timedelta(days=20))
        assert loan.status == LoanStatus.RETURNED
        with pytest.raises(DomainValidationError, match="Cannot mark returned loan"):
            loan.mark_as_overdue()

    def test_fine_is_zero_until_due(self) -> None:
        loan = _loan()
        assert loan.calculate_fine(JAN_1 + timedelta(days=1)) == 0
        assert loan.calculate_fine(loan.expected_return_date) == 0

    def test_fine_rounds_partial_days_up(self) -> None:
        loan = _loan()
        assert loan.calculate_fine(loan.expected_return_date + timedelta(seconds=1)) == Decimal("1.5")
        assert loan.calculate_fine(loan.expected_return_date + timedelta(days=4)) == Decimal("6.0")

    def test_fine_for_returned_loan_uses_stored_return_date(self) -> None:
        """Returned on Jan 20, due Jan 15: five days at 1.5."""
        loan = _loan()
        loan.return_book(datetime(2024, 1, 20, tzinfo=timezone.utc))
        assert loan.calculate_fine() == Decimal("7.5")
        assert loan.calculate_fine(datetime(2030, 1, 1, tzinfo=timezone.utc)) == Decimal("7.5")

    def test_days_until_due(self) -> None:
        loan = _loan()
        assert loan.get_days_until_due(JAN_1) == 14
        assert loan.get_days_until_due(JAN_1 + timedelta(days=13, hours=12)) == 1
        assert loan.get_days_until_due(loan.expected_return_date + timedelta(hours=36)) == -1
        loan.return_book(JAN_1 + timedelta(days=2))
        assert loan.get_days_until_due(JAN_1) == 0


# ══════════════════════════════════════════════════════════════
# Rules
# ══════════════════════════════════════════════════════════════


class TestLoanRules:
    """Tests for LoanRules ordering and reasons."""

    def test_allows_borrow(self) -> None:
        decision = LoanRules.can_user_borrow_book(_user(), _book(), [], [])
        assert decision.can_borrow
        assert decision.reason is None

    def test_overdue_loans_checked_first(self) -> None:
        """Overdue loans deny the borrow even when every other rule also fails."""
        empty_book = _book(available=0)
        active = [_loan() for _ in range(3)]
        decision = LoanRules.can_user_borrow_book(_user(), empty_book, active, [_loan()])
        assert not decision.can_borrow
        assert "overdue loans" in decision.reason

    def test_no_copies_checked_before_cap(self) -> None:
        active = [_loan() for _ in range(3)]
        decision = LoanRules.can_user_borrow_book(_user(), _book(available=0), active, [])
        assert decision.reason == "Book has no available copies"

    @pytest.mark.parametrize(
        "user_type, cap", [(UserType.STUDENT, 3), (UserType.TEACHER, 5), (UserType.ADMIN, 10)]
    )
    def test_loan_cap(self, user_type: UserType, cap: int) -> None:
        user = _user(user_type)
        below = LoanRules.can_user_borrow_book(user, _book(), [_loan()] * (cap - 1), [])
        at_cap = LoanRules.can_user_borrow_book(user, _book(), [_loan()] * cap, [])
        assert below.can_borrow
        assert not at_cap.can_borrow
        assert at_cap.reason == (
            f"User has reached maximum active loans ({cap} for {user_type.value})"
        )

    def test_validate_return_book(self) -> None:
        loan = _loan()
        assert LoanRules.validate_return_book(loan).can_return
        loan.return_book(JAN_1 + timedelta(days=1))
        decision = LoanRules.validate_return_book(loan)
        assert not decision.can_return
        assert decision.reason == "Loan is already returned"


class TestDomainErrors:
    """Tests for domain error classes."""

    def test_not_found_defaults(self) -> None:
        err = BookNotFoundError()
        assert isinstance(err, NotFoundError)
        assert err.message == "Book is not found"

    def test_borrow_denied_keeps_reason(self) -> None:
        err = LoanBorrowDeniedError("Book has no available copies")
        assert err.reason == "Book has no available copies"
        assert str(err) == "Book has no available copies"

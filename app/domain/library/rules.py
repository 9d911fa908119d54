"""
Loan eligibility rules.

Pure decision functions: no side effects and no IO. They consume
collections that the caller has already fetched and never query
repositories themselves.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from app.domain.library.entities import Book, Loan, User

OVERDUE_LOANS_REASON = (
    "User has overdue loans and cannot borrow more books until they are returned"
)
NO_COPIES_REASON = "Book has no available copies"
ALREADY_RETURNED_REASON = "Loan is already returned"


@dataclass(frozen=True)
class BorrowDecision:
    """Outcome of a borrow eligibility check."""

    can_borrow: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class ReturnDecision:
    """Outcome of a return eligibility check."""

    can_return: bool
    reason: Optional[str] = None


class LoanRules:
    """Borrow and return eligibility rules."""

    @staticmethod
    def can_user_borrow_book(
        user: User,
        book: Book,
        active_loans: Sequence[Loan],
        overdue_loans: Sequence[Loan],
    ) -> BorrowDecision:
        """Decide whether ``user`` may borrow ``book``.

        Rules are evaluated in order and the first failing rule wins:

        1. The user has no overdue loans.
        2. The book has at least one available copy.
        3. The user is below the active-loan cap for their type.
        """
        if overdue_loans:
            return BorrowDecision(False, OVERDUE_LOANS_REASON)

        if not book.has_available_copies():
            return BorrowDecision(False, NO_COPIES_REASON)

        max_loans = user.get_max_active_loans()
        if len(active_loans) >= max_loans:
            return BorrowDecision(
                False,
                f"User has reached maximum active loans "
                f"({max_loans} for {user.type.value})",
            )

        return BorrowDecision(True)

    @staticmethod
    def validate_return_book(loan: Loan) -> ReturnDecision:
        if loan.is_returned():
            return ReturnDecision(False, ALREADY_RETURNED_REASON)
        return ReturnDecision(True)

    @staticmethod
    def calculate_fine(loan: Loan, as_of: Optional[datetime] = None) -> Decimal:
        return loan.calculate_fine(as_of)

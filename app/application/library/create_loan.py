"""
Use case: Lend a book to a user.

Input: CreateLoanCommand (book_id, user_id, loan_date)
Output: Loan (the newly created ACTIVE loan)
Side effects: One loan insert, one book update.
Failure cases: BookNotFoundError, UserNotFoundError, LoanBorrowDeniedError.

The two writes are independent: there is no compensating rollback if
the book update fails after the loan insert, and two concurrent calls
for the last copy of a book can both pass the availability rule.
"""

import logging
from uuid import uuid4

from app.application.library.dtos import CreateLoanCommand
from app.domain.library.entities import Loan
from app.domain.library.errors import (
    BookNotFoundError,
    LoanBorrowDeniedError,
    UserNotFoundError,
)
from app.domain.library.ports import BookRepository, LoanRepository, UserRepository
from app.domain.library.rules import LoanRules
from app.shared.clock import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class CreateLoanUseCase:
    """Orchestrates lending a book.

    Reads the book, the borrower and the borrower's active and overdue
    loans, evaluates LoanRules, and only then mutates and persists.
    """

    def __init__(
        self,
        book_repo: BookRepository,
        user_repo: UserRepository,
        loan_repo: LoanRepository,
    ) -> None:
        self._book_repo = book_repo
        self._user_repo = user_repo
        self._loan_repo = loan_repo

    def execute(self, command: CreateLoanCommand) -> Loan:
        """Run the create-loan use case.

        Args:
            command: The book, the borrower and an optional start date.

        Returns:
            The created loan.

        Raises:
            BookNotFoundError: If the book does not exist.
            UserNotFoundError: If the user does not exist.
            LoanBorrowDeniedError: If a loan rule denies the borrow.
        """
        book = self._book_repo.find_by_id(command.book_id)
        if book is None:
            raise BookNotFoundError()

        user = self._user_repo.find_by_id(command.user_id)
        if user is None:
            raise UserNotFoundError()

        active_loans = self._loan_repo.find_active_by_user_id(user.id)
        overdue_loans = self._loan_repo.find_overdue_by_user_id(user.id)

        decision = LoanRules.can_user_borrow_book(
            user, book, active_loans, overdue_loans
        )
        if not decision.can_borrow:
            logger.warning(
                "Borrow denied: book=%s user=%s reason=%s",
                book.id,
                user.id,
                decision.reason,
            )
            raise LoanBorrowDeniedError(decision.reason)

        loan_date = ensure_utc(command.loan_date) if command.loan_date else utc_now()
        loan = Loan.create_new(
            id=str(uuid4()),
            book_id=book.id,
            user_id=user.id,
            user_type=user.type,
            loan_date=loan_date,
        )
        book.decrease_available_copies()

        self._loan_repo.save(loan)
        self._book_repo.update(book)

        logger.info(
            "Loan created: loan=%s book=%s user=%s due=%s",
            loan.id,
            book.id,
            user.id,
            loan.expected_return_date.isoformat(),
        )
        return loan

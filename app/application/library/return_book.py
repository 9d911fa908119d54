"""
Use case: Return a borrowed book.

Input: ReturnBookCommand (loan_id, return_date)
Output: ReturnBookResult (loan, fine)
Side effects: One loan update, one book update.
Failure cases: LoanNotFoundError, BookNotFoundError, LoanBorrowDeniedError.
"""

import logging

from app.application.library.dtos import ReturnBookCommand, ReturnBookResult
from app.domain.library.errors import (
    BookNotFoundError,
    LoanBorrowDeniedError,
    LoanNotFoundError,
)
from app.domain.library.ports import BookRepository, LoanRepository
from app.domain.library.rules import LoanRules
from app.shared.clock import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class ReturnBookUseCase:
    """Orchestrates closing a loan and putting the copy back on the shelf.

    The fine is computed from the loan before it is mutated, using the
    normalized return date.
    """

    def __init__(self, book_repo: BookRepository, loan_repo: LoanRepository) -> None:
        self._book_repo = book_repo
        self._loan_repo = loan_repo

    def execute(self, command: ReturnBookCommand) -> ReturnBookResult:
        """Run the return-book use case.

        Args:
            command: The loan to close and an optional return date.

        Returns:
            The returned loan together with the fine owed.

        Raises:
            LoanNotFoundError: If the loan does not exist.
            BookNotFoundError: If the loan's book no longer exists.
            LoanBorrowDeniedError: If the loan was already returned.
        """
        loan = self._loan_repo.find_by_id(command.loan_id)
        if loan is None:
            raise LoanNotFoundError()

        book = self._book_repo.find_by_id(loan.book_id)
        if book is None:
            raise BookNotFoundError()

        decision = LoanRules.validate_return_book(loan)
        if not decision.can_return:
            logger.warning("Return denied: loan=%s reason=%s", loan.id, decision.reason)
            raise LoanBorrowDeniedError(decision.reason)

        return_date = (
            ensure_utc(command.return_date) if command.return_date else utc_now()
        )
        fine = loan.calculate_fine(return_date)

        loan.return_book(return_date)
        book.increase_available_copies()

        self._loan_repo.update(loan)
        self._book_repo.update(book)

        logger.info("Loan returned: loan=%s book=%s fine=%s", loan.id, book.id, fine)
        return ReturnBookResult(loan=loan, fine=fine)

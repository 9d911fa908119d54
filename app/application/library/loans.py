"""
Use cases: Loan queries and removal.

Lending and returning live in ``create_loan`` and ``return_book``;
this module only reads and deletes loan records.
Failure cases: LoanNotFoundError.
"""

import logging

from app.domain.library.entities import Loan
from app.domain.library.errors import LoanNotFoundError
from app.domain.library.ports import LoanRepository

logger = logging.getLogger(__name__)


class GetLoanByIdUseCase:
    def __init__(self, loan_repo: LoanRepository) -> None:
        self._loan_repo = loan_repo

    def execute(self, loan_id: str) -> Loan:
        loan = self._loan_repo.find_by_id(loan_id)
        if loan is None:
            raise LoanNotFoundError()
        return loan


class ListLoansUseCase:
    def __init__(self, loan_repo: LoanRepository) -> None:
        self._loan_repo = loan_repo

    def execute(self) -> list[Loan]:
        return self._loan_repo.find_all()


class GetUserLoansUseCase:
    """Returns every loan (any status) held by a user.

    An empty history is reported as not found.
    """

    def __init__(self, loan_repo: LoanRepository) -> None:
        self._loan_repo = loan_repo

    def execute(self, user_id: str) -> list[Loan]:
        loans = self._loan_repo.find_by_user_id(user_id)
        if not loans:
            raise LoanNotFoundError("User doesn't have associated loans")
        return loans


class GetBookLoansUseCase:
    """Returns every loan (any status) of a book.

    An empty history is reported as not found.
    """

    def __init__(self, loan_repo: LoanRepository) -> None:
        self._loan_repo = loan_repo

    def execute(self, book_id: str) -> list[Loan]:
        loans = self._loan_repo.find_by_book_id(book_id)
        if not loans:
            raise LoanNotFoundError("Loans by book not found")
        return loans


class DeleteLoanUseCase:
    def __init__(self, loan_repo: LoanRepository) -> None:
        self._loan_repo = loan_repo

    def execute(self, loan_id: str) -> None:
        self._loan_repo.delete(loan_id)
        logger.info("Loan deleted: loan=%s", loan_id)

"""
Use case: Mark ACTIVE loans past their due date as OVERDUE.

Input: MarkOverdueLoansCommand (as_of)
Output: list[Loan] (the loans that were marked)
Side effects: One conditional loan update per candidate loan.

Meant to be run periodically. Once a loan is OVERDUE, the borrower is
blocked from new loans until it is returned. A loan returned between
the sweep's read and its write keeps its RETURNED state and is not
reported as marked.
"""

import logging

from app.application.library.dtos import MarkOverdueLoansCommand
from app.domain.library.entities import Loan
from app.domain.library.ports import LoanRepository
from app.shared.clock import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class MarkOverdueLoansUseCase:
    def __init__(self, loan_repo: LoanRepository) -> None:
        self._loan_repo = loan_repo

    def execute(self, command: MarkOverdueLoansCommand) -> list[Loan]:
        as_of = ensure_utc(command.as_of) if command.as_of else utc_now()

        marked = []
        for loan in self._loan_repo.find_active_due_before(as_of):
            loan.mark_as_overdue()
            if self._loan_repo.mark_overdue(loan):
                marked.append(loan)
            else:
                logger.info("Overdue sweep skipped loan=%s: no longer active", loan.id)

        logger.info("Overdue sweep as of %s marked %d loan(s)", as_of.isoformat(), len(marked))
        return marked

"""
Adapter: Loan repository.

Implements LoanRepository port on the ``loans`` table.
Timestamps are written as UTC and normalized back to aware UTC on read.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine, Row
from sqlalchemy.sql import Select

from app.domain.library.entities import Loan
from app.domain.library.enums import LoanStatus
from app.domain.library.errors import LoanNotFoundError
from app.domain.library.ports import LoanRepository
from app.infrastructure.library.database import as_utc, loans_table
from app.shared.clock import ensure_utc

logger = logging.getLogger(__name__)


def _row_to_loan(row: Row) -> Loan:
    return Loan(
        id=row.id,
        book_id=row.book_id,
        user_id=row.user_id,
        loan_date=as_utc(row.loan_date),
        expected_return_date=as_utc(row.expected_return_date),
        return_date=as_utc(row.return_date),
        status=LoanStatus(row.status),
        user_type=row.user_type,
    )


class LoanRepositoryAdapter(LoanRepository):
    """SQLAlchemy implementation of the loan repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch_all(self, query: Select) -> list[Loan]:
        with self._engine.connect() as conn:
            rows = conn.execute(query.order_by(loans_table.c.loan_date)).fetchall()
        return [_row_to_loan(r) for r in rows]

    def find_by_id(self, loan_id: str) -> Optional[Loan]:
        query = select(loans_table).where(loans_table.c.id == loan_id)
        with self._engine.connect() as conn:
            row = conn.execute(query).first()
        return _row_to_loan(row) if row else None

    def find_by_user_id(self, user_id: str) -> list[Loan]:
        return self._fetch_all(
            select(loans_table).where(loans_table.c.user_id == user_id)
        )

    def find_active_by_user_id(self, user_id: str) -> list[Loan]:
        return self._fetch_all(
            select(loans_table).where(
                loans_table.c.user_id == user_id,
                loans_table.c.status == LoanStatus.ACTIVE.value,
            )
        )

    def find_overdue_by_user_id(self, user_id: str) -> list[Loan]:
        return self._fetch_all(
            select(loans_table).where(
                loans_table.c.user_id == user_id,
                loans_table.c.status == LoanStatus.OVERDUE.value,
            )
        )

    def find_by_book_id(self, book_id: str) -> list[Loan]:
        return self._fetch_all(
            select(loans_table).where(loans_table.c.book_id == book_id)
        )

    def find_active_due_before(self, moment: datetime) -> list[Loan]:
        return self._fetch_all(
            select(loans_table).where(
                loans_table.c.status == LoanStatus.ACTIVE.value,
                loans_table.c.expected_return_date < ensure_utc(moment),
            )
        )

    def save(self, loan: Loan) -> Loan:
        with self._engine.begin() as conn:
            conn.execute(
                insert(loans_table).values(
                    id=loan.id,
                    book_id=loan.book_id,
                    user_id=loan.user_id,
                    loan_date=ensure_utc(loan.loan_date),
                    expected_return_date=ensure_utc(loan.expected_return_date),
                    return_date=(
                        ensure_utc(loan.return_date) if loan.return_date else None
                    ),
                    status=loan.status.value,
                    user_type=loan.user_type.value,
                )
            )
        logger.debug("Saved loan: id=%s status=%s", loan.id, loan.status.value)
        return loan

    def update(self, loan: Loan) -> Loan:
        # Only the mutable part of a loan is written back.
        stmt = (
            update(loans_table)
            .where(loans_table.c.id == loan.id)
            .values(
                return_date=ensure_utc(loan.return_date) if loan.return_date else None,
                status=loan.status.value,
            )
        )
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        if result.rowcount == 0:
            raise LoanNotFoundError()
        logger.debug("Updated loan: id=%s status=%s", loan.id, loan.status.value)
        return loan

    def mark_overdue(self, loan: Loan) -> bool:
        stmt = (
            update(loans_table)
            .where(
                loans_table.c.id == loan.id,
                loans_table.c.status == LoanStatus.ACTIVE.value,
            )
            .values(status=LoanStatus.OVERDUE.value)
        )
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        if result.rowcount == 0:
            logger.debug("Loan no longer active, not marked overdue: id=%s", loan.id)
            return False
        logger.debug("Marked loan overdue: id=%s", loan.id)
        return True

    def find_all(self) -> list[Loan]:
        return self._fetch_all(select(loans_table))

    def delete(self, loan_id: str) -> None:
        with self._engine.begin() as conn:
            result = conn.execute(delete(loans_table).where(loans_table.c.id == loan_id))
        if result.rowcount == 0:
            raise LoanNotFoundError()

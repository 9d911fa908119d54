"""
Dependency injection for the library bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the library context.
Tests replace ``get_engine`` through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.library.books import (
    CheckBookAvailabilityUseCase,
    CreateBookUseCase,
    DeleteBookUseCase,
    FindBookByISBNUseCase,
    GetBookByIdUseCase,
    ListBooksUseCase,
    UpdateBookUseCase,
)
from app.application.library.create_loan import CreateLoanUseCase
from app.application.library.loans import (
    DeleteLoanUseCase,
    GetBookLoansUseCase,
    GetLoanByIdUseCase,
    GetUserLoansUseCase,
    ListLoansUseCase,
)
from app.application.library.mark_overdue_loans import MarkOverdueLoansUseCase
from app.application.library.return_book import ReturnBookUseCase
from app.application.library.users import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserByEmailUseCase,
    GetUserByIdUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from app.core.config import settings
from app.infrastructure.library.book_repository import BookRepositoryAdapter
from app.infrastructure.library.database import build_engine
from app.infrastructure.library.loan_repository import LoanRepositoryAdapter
from app.infrastructure.library.user_repository import UserRepositoryAdapter


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Build the process-wide SQLAlchemy engine from application settings."""
    return build_engine(settings.get_database_url())


# ── Books ────────────────────────────────────────────────────────


def get_create_book_use_case(engine: Engine = Depends(get_engine)) -> CreateBookUseCase:
    return CreateBookUseCase(book_repo=BookRepositoryAdapter(engine))


def get_book_by_id_use_case(engine: Engine = Depends(get_engine)) -> GetBookByIdUseCase:
    return GetBookByIdUseCase(book_repo=BookRepositoryAdapter(engine))


def get_find_book_by_isbn_use_case(
    engine: Engine = Depends(get_engine),
) -> FindBookByISBNUseCase:
    return FindBookByISBNUseCase(book_repo=BookRepositoryAdapter(engine))


def get_list_books_use_case(engine: Engine = Depends(get_engine)) -> ListBooksUseCase:
    return ListBooksUseCase(book_repo=BookRepositoryAdapter(engine))


def get_update_book_use_case(engine: Engine = Depends(get_engine)) -> UpdateBookUseCase:
    return UpdateBookUseCase(book_repo=BookRepositoryAdapter(engine))


def get_delete_book_use_case(engine: Engine = Depends(get_engine)) -> DeleteBookUseCase:
    return DeleteBookUseCase(book_repo=BookRepositoryAdapter(engine))


def get_check_book_availability_use_case(
    engine: Engine = Depends(get_engine),
) -> CheckBookAvailabilityUseCase:
    return CheckBookAvailabilityUseCase(book_repo=BookRepositoryAdapter(engine))


# ── Users ────────────────────────────────────────────────────────


def get_create_user_use_case(engine: Engine = Depends(get_engine)) -> CreateUserUseCase:
    return CreateUserUseCase(user_repo=UserRepositoryAdapter(engine))


def get_user_by_id_use_case(engine: Engine = Depends(get_engine)) -> GetUserByIdUseCase:
    return GetUserByIdUseCase(user_repo=UserRepositoryAdapter(engine))


def get_user_by_email_use_case(
    engine: Engine = Depends(get_engine),
) -> GetUserByEmailUseCase:
    return GetUserByEmailUseCase(user_repo=UserRepositoryAdapter(engine))


def get_list_users_use_case(engine: Engine = Depends(get_engine)) -> ListUsersUseCase:
    return ListUsersUseCase(user_repo=UserRepositoryAdapter(engine))


def get_update_user_use_case(engine: Engine = Depends(get_engine)) -> UpdateUserUseCase:
    return UpdateUserUseCase(user_repo=UserRepositoryAdapter(engine))


def get_delete_user_use_case(engine: Engine = Depends(get_engine)) -> DeleteUserUseCase:
    return DeleteUserUseCase(user_repo=UserRepositoryAdapter(engine))


# ── Loans ────────────────────────────────────────────────────────


def get_create_loan_use_case(engine: Engine = Depends(get_engine)) -> CreateLoanUseCase:
    """Build CreateLoanUseCase with its infrastructure dependencies."""
    return CreateLoanUseCase(
        book_repo=BookRepositoryAdapter(engine),
        user_repo=UserRepositoryAdapter(engine),
        loan_repo=LoanRepositoryAdapter(engine),
    )


def get_return_book_use_case(engine: Engine = Depends(get_engine)) -> ReturnBookUseCase:
    """Build ReturnBookUseCase with its infrastructure dependencies."""
    return ReturnBookUseCase(
        book_repo=BookRepositoryAdapter(engine),
        loan_repo=LoanRepositoryAdapter(engine),
    )


def get_mark_overdue_loans_use_case(
    engine: Engine = Depends(get_engine),
) -> MarkOverdueLoansUseCase:
    return MarkOverdueLoansUseCase(loan_repo=LoanRepositoryAdapter(engine))


def get_loan_by_id_use_case(engine: Engine = Depends(get_engine)) -> GetLoanByIdUseCase:
    return GetLoanByIdUseCase(loan_repo=LoanRepositoryAdapter(engine))


def get_list_loans_use_case(engine: Engine = Depends(get_engine)) -> ListLoansUseCase:
    return ListLoansUseCase(loan_repo=LoanRepositoryAdapter(engine))


def get_user_loans_use_case(engine: Engine = Depends(get_engine)) -> GetUserLoansUseCase:
    return GetUserLoansUseCase(loan_repo=LoanRepositoryAdapter(engine))


def get_book_loans_use_case(engine: Engine = Depends(get_engine)) -> GetBookLoansUseCase:
    return GetBookLoansUseCase(loan_repo=LoanRepositoryAdapter(engine))


def get_delete_loan_use_case(engine: Engine = Depends(get_engine)) -> DeleteLoanUseCase:
    return DeleteLoanUseCase(loan_repo=LoanRepositoryAdapter(engine))

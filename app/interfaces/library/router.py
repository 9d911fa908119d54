"""
FastAPI routers for the library bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Request, status

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
from app.application.library.dtos import (
    CreateBookCommand,
    CreateLoanCommand,
    CreateUserCommand,
    MarkOverdueLoansCommand,
    ReturnBookCommand,
    UpdateBookCommand,
    UpdateUserCommand,
)
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
from app.domain.library.entities import Book, Loan, User
from app.interfaces.library.dependencies import (
    get_book_by_id_use_case,
    get_book_loans_use_case,
    get_check_book_availability_use_case,
    get_create_book_use_case,
    get_create_loan_use_case,
    get_create_user_use_case,
    get_delete_book_use_case,
    get_delete_loan_use_case,
    get_delete_user_use_case,
    get_find_book_by_isbn_use_case,
    get_list_books_use_case,
    get_list_loans_use_case,
    get_list_users_use_case,
    get_loan_by_id_use_case,
    get_mark_overdue_loans_use_case,
    get_return_book_use_case,
    get_update_book_use_case,
    get_update_user_use_case,
    get_user_by_email_use_case,
    get_user_by_id_use_case,
    get_user_loans_use_case,
)
from app.interfaces.library.schemas import (
    BookAvailabilityResponse,
    BookResponse,
    CreateBookRequest,
    CreateLoanRequest,
    CreateUserRequest,
    ErrorResponse,
    LoanResponse,
    OverdueSweepResponse,
    ReturnBookRequest,
    ReturnBookResponse,
    UpdateBookRequest,
    UpdateUserRequest,
    UserResponse,
)
from app.shared.security.rate_limiting import limiter

NOT_FOUND = {404: {"model": ErrorResponse}}
INVALID = {422: {"model": ErrorResponse}}
CONFLICT = {409: {"model": ErrorResponse}}
DENIED = {400: {"model": ErrorResponse}}

books_router = APIRouter(prefix="/books", tags=["books"])
users_router = APIRouter(prefix="/users", tags=["users"])
loans_router = APIRouter(prefix="/loans", tags=["loans"])


def _book_response(book: Book) -> BookResponse:
    return BookResponse(
        id=book.id,
        isbn=book.isbn.value,
        title=book.title,
        author=book.author,
        publication_year=book.publication_year,
        category=book.category,
        available_copies=book.available_copies,
        total_copies=book.total_copies,
    )


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email.value,
        type=user.type,
        max_active_loans=user.get_max_active_loans(),
    )


def _loan_response(loan: Loan) -> LoanResponse:
    return LoanResponse(
        id=loan.id,
        book_id=loan.book_id,
        user_id=loan.user_id,
        loan_date=loan.loan_date,
        expected_return_date=loan.expected_return_date,
        return_date=loan.return_date,
        status=loan.status,
        user_type=loan.user_type,
        days_until_due=loan.get_days_until_due(),
        current_fine=float(loan.calculate_fine()),
    )


# ── Books ────────────────────────────────────────────────────────


@books_router.get("", response_model=list[BookResponse], summary="List books")
def list_books(
    use_case: ListBooksUseCase = Depends(get_list_books_use_case),
) -> list[BookResponse]:
    """Return every registered book."""
    return [_book_response(b) for b in use_case.execute()]


@books_router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses=INVALID,
    summary="Register a book",
)
def create_book(
    payload: CreateBookRequest,
    use_case: CreateBookUseCase = Depends(get_create_book_use_case),
) -> BookResponse:
    """Register a new book after validating its ISBN and copy counts."""
    book = use_case.execute(CreateBookCommand(**payload.model_dump()))
    return _book_response(book)


@books_router.get(
    "/isbn/{isbn}", response_model=BookResponse, responses=NOT_FOUND, summary="Find book by ISBN"
)
def find_book_by_isbn(
    isbn: str,
    use_case: FindBookByISBNUseCase = Depends(get_find_book_by_isbn_use_case),
) -> BookResponse:
    """Look a book up by its ISBN exactly as it was registered."""
    return _book_response(use_case.execute(isbn))


@books_router.get(
    "/{book_id}", response_model=BookResponse, responses=NOT_FOUND, summary="Get book"
)
def get_book(
    book_id: str,
    use_case: GetBookByIdUseCase = Depends(get_book_by_id_use_case),
) -> BookResponse:
    return _book_response(use_case.execute(book_id))


@books_router.get(
    "/{book_id}/availability",
    response_model=BookAvailabilityResponse,
    responses=NOT_FOUND,
    summary="Check book availability",
)
def check_book_availability(
    book_id: str,
    use_case: CheckBookAvailabilityUseCase = Depends(get_check_book_availability_use_case),
) -> BookAvailabilityResponse:
    """Report how many copies of a book can be lent right now."""
    result = use_case.execute(book_id)
    return BookAvailabilityResponse(
        book_id=result.book_id,
        title=result.title,
        available_copies=result.available_copies,
        total_copies=result.total_copies,
        is_available=result.is_available,
    )


@books_router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses={**NOT_FOUND, **INVALID},
    summary="Update book",
)
def update_book(
    book_id: str,
    payload: UpdateBookRequest,
    use_case: UpdateBookUseCase = Depends(get_update_book_use_case),
) -> BookResponse:
    """Replace the provided fields of a book; omitted fields are kept."""
    command = UpdateBookCommand(book_id=book_id, **payload.model_dump(exclude_unset=True))
    return _book_response(use_case.execute(command))


@books_router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND,
    summary="Delete book",
)
def delete_book(
    book_id: str,
    use_case: DeleteBookUseCase = Depends(get_delete_book_use_case),
) -> None:
    use_case.execute(book_id)


# ── Users ────────────────────────────────────────────────────────


@users_router.get("", response_model=list[UserResponse], summary="List users")
def list_users(
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
) -> list[UserResponse]:
    return [_user_response(u) for u in use_case.execute()]


@users_router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**CONFLICT, **INVALID},
    summary="Register a user",
)
def create_user(
    payload: CreateUserRequest,
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
) -> UserResponse:
    """Register a user. The email must not already be in use."""
    user = use_case.execute(
        CreateUserCommand(name=payload.name, email=payload.email, type=payload.type)
    )
    return _user_response(user)


@users_router.get(
    "/email/{email}",
    response_model=UserResponse,
    responses=NOT_FOUND,
    summary="Get user by email",
)
def get_user_by_email(
    email: str,
    use_case: GetUserByEmailUseCase = Depends(get_user_by_email_use_case),
) -> UserResponse:
    return _user_response(use_case.execute(email))


@users_router.get(
    "/{user_id}", response_model=UserResponse, responses=NOT_FOUND, summary="Get user"
)
def get_user(
    user_id: str,
    use_case: GetUserByIdUseCase = Depends(get_user_by_id_use_case),
) -> UserResponse:
    return _user_response(use_case.execute(user_id))


@users_router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={**NOT_FOUND, **CONFLICT, **INVALID},
    summary="Update user",
)
def update_user(
    user_id: str,
    payload: UpdateUserRequest,
    use_case: UpdateUserUseCase = Depends(get_update_user_use_case),
) -> UserResponse:
    """Replace the provided fields of a user; a new email must be unique."""
    command = UpdateUserCommand(user_id=user_id, **payload.model_dump(exclude_unset=True))
    return _user_response(use_case.execute(command))


@users_router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND,
    summary="Delete user",
)
def delete_user(
    user_id: str,
    use_case: DeleteUserUseCase = Depends(get_delete_user_use_case),
) -> None:
    use_case.execute(user_id)


# ── Loans ────────────────────────────────────────────────────────


@loans_router.get("", response_model=list[LoanResponse], summary="List loans")
def list_loans(
    use_case: ListLoansUseCase = Depends(get_list_loans_use_case),
) -> list[LoanResponse]:
    return [_loan_response(loan) for loan in use_case.execute()]


@loans_router.post(
    "",
    response_model=LoanResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**NOT_FOUND, **DENIED},
    summary="Lend a book",
    description=(
        "Lend a book to a user. Denied when the user has overdue loans, "
        "the book has no copies left, or the user reached their loan cap."
    ),
)
@limiter.limit(settings.rate_limit_default)
def create_loan(
    request: Request,
    payload: CreateLoanRequest,
    use_case: CreateLoanUseCase = Depends(get_create_loan_use_case),
) -> LoanResponse:
    loan = use_case.execute(
        CreateLoanCommand(book_id=payload.book_id, user_id=payload.user_id)
    )
    return _loan_response(loan)


@loans_router.post(
    "/return",
    response_model=ReturnBookResponse,
    responses={**NOT_FOUND, **DENIED},
    summary="Return a book",
    description="Close a loan, put the copy back and report the overdue fine.",
)
@limiter.limit(settings.rate_limit_default)
def return_book(
    request: Request,
    payload: ReturnBookRequest,
    use_case: ReturnBookUseCase = Depends(get_return_book_use_case),
) -> ReturnBookResponse:
    result = use_case.execute(
        ReturnBookCommand(loan_id=payload.loan_id, return_date=payload.return_date)
    )
    return ReturnBookResponse(loan=_loan_response(result.loan), fine=float(result.fine))


@loans_router.post(
    "/overdue/sweep",
    response_model=OverdueSweepResponse,
    summary="Mark overdue loans",
    description="Mark every ACTIVE loan due before `as_of` (default: now) as OVERDUE.",
)
@limiter.limit(settings.rate_limit_heavy)
def sweep_overdue_loans(
    request: Request,
    as_of: datetime | None = None,
    use_case: MarkOverdueLoansUseCase = Depends(get_mark_overdue_loans_use_case),
) -> OverdueSweepResponse:
    marked = use_case.execute(MarkOverdueLoansCommand(as_of=as_of))
    return OverdueSweepResponse(marked=[_loan_response(loan) for loan in marked])


@loans_router.get(
    "/user/{user_id}",
    response_model=list[LoanResponse],
    responses=NOT_FOUND,
    summary="List a user's loans",
)
def get_user_loans(
    user_id: str,
    use_case: GetUserLoansUseCase = Depends(get_user_loans_use_case),
) -> list[LoanResponse]:
    return [_loan_response(loan) for loan in use_case.execute(user_id)]


@loans_router.get(
    "/book/{book_id}",
    response_model=list[LoanResponse],
    responses=NOT_FOUND,
    summary="List a book's loans",
)
def get_book_loans(
    book_id: str,
    use_case: GetBookLoansUseCase = Depends(get_book_loans_use_case),
) -> list[LoanResponse]:
    return [_loan_response(loan) for loan in use_case.execute(book_id)]


@loans_router.get(
    "/{loan_id}", response_model=LoanResponse, responses=NOT_FOUND, summary="Get loan"
)
def get_loan(
    loan_id: str,
    use_case: GetLoanByIdUseCase = Depends(get_loan_by_id_use_case),
) -> LoanResponse:
    return _loan_response(use_case.execute(loan_id))


@loans_router.delete(
    "/{loan_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND,
    summary="Delete loan",
)
def delete_loan(
    loan_id: str,
    use_case: DeleteLoanUseCase = Depends(get_delete_loan_use_case),
) -> None:
    use_case.execute(loan_id)


router = APIRouter()
router.include_router(books_router)
router.include_router(users_router)
router.include_router(loans_router)

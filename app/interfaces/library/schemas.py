"""
Pydantic schemas for library API request/response validation.

These schemas enforce input shape and define the API contract.
Domain invariants (ISBN checksum, email shape, copy counts,
publication year) are still enforced by the domain layer.
No business logic belongs here.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.library.enums import LoanStatus, UserType

ID_DESCRIPTION = "Opaque unique identifier"
ISBN_DESCRIPTION = "ISBN-10 or ISBN-13, hyphens and spaces allowed"
ISBN_MAX_LEN = 32
NAME_MAX_LEN = 255


class HealthResponse(BaseModel):
    """Response schema for the health endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
    detail: str | None = None


# ------------------------------------------------------------------
# Books
# ------------------------------------------------------------------


class CreateBookRequest(BaseModel):
    """Request schema for registering a book."""

    isbn: str = Field(
        ..., min_length=10, max_length=ISBN_MAX_LEN, description=ISBN_DESCRIPTION
    )
    title: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    author: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    publication_year: int = Field(..., description="Year of publication (>= 1000)")
    category: str = Field(..., max_length=120)
    available_copies: int = Field(..., ge=0)
    total_copies: int = Field(..., ge=0)


class UpdateBookRequest(BaseModel):
    """Request schema for a partial book update. Omitted fields are unchanged."""

    isbn: str | None = Field(
        default=None, min_length=10, max_length=ISBN_MAX_LEN, description=ISBN_DESCRIPTION
    )
    title: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    author: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    publication_year: int | None = None
    category: str | None = Field(default=None, max_length=120)
    available_copies: int | None = Field(default=None, ge=0)
    total_copies: int | None = Field(default=None, ge=0)


class BookResponse(BaseModel):
    """A book in the response."""

    id: str
    isbn: str
    title: str
    author: str
    publication_year: int
    category: str
    available_copies: int
    total_copies: int


class BookAvailabilityResponse(BaseModel):
    """Response schema for the availability endpoint."""

    book_id: str
    title: str
    available_copies: int
    total_copies: int
    is_available: bool


# ------------------------------------------------------------------
# Users
# ------------------------------------------------------------------


class CreateUserRequest(BaseModel):
    """Request schema for registering a user."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    email: str = Field(..., max_length=320, description="Unique, case-insensitive")
    type: UserType


class UpdateUserRequest(BaseModel):
    """Request schema for a partial user update. Omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    email: str | None = Field(default=None, max_length=320)
    type: UserType | None = None


class UserResponse(BaseModel):
    """A user in the response."""

    id: str
    name: str
    email: str
    type: UserType
    max_active_loans: int


# ------------------------------------------------------------------
# Loans
# ------------------------------------------------------------------


class CreateLoanRequest(BaseModel):
    """Request schema for lending a book."""

    book_id: str = Field(..., min_length=1, description=ID_DESCRIPTION)
    user_id: str = Field(..., min_length=1, description=ID_DESCRIPTION)


class ReturnBookRequest(BaseModel):
    """Request schema for returning a book.

    Attributes:
        loan_id: Loan being closed.
        return_date: ISO 8601 timestamp. Defaults to now; naive values are UTC.
    """

    loan_id: str = Field(..., min_length=1, description=ID_DESCRIPTION)
    return_date: datetime | None = None


class LoanResponse(BaseModel):
    """A loan in the response."""

    id: str
    book_id: str
    user_id: str
    loan_date: datetime
    expected_return_date: datetime
    return_date: datetime | None
    status: LoanStatus
    user_type: UserType
    days_until_due: int
    current_fine: float


class ReturnBookResponse(BaseModel):
    """Response schema for a returned book and the fine owed."""

    loan: LoanResponse
    fine: float


class OverdueSweepResponse(BaseModel):
    """Response schema for the overdue sweep."""

    marked: list[LoanResponse]

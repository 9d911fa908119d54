"""
Domain-specific errors for the library bounded context.

All errors raised from the domain and application layers are defined here.
They are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class LibraryDomainError(Exception):
    """Base error for all library domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class DomainValidationError(LibraryDomainError):
    """Raised when an entity or value object invariant is violated."""


class InvalidEmailError(DomainValidationError):
    """Raised when an email address does not have the local@domain.tld shape."""

    def __init__(self, value: str) -> None:
        super().__init__("Invalid email format")
        self.value = value


class InvalidISBNError(DomainValidationError):
    """Raised when an ISBN has the wrong length or a failing checksum."""

    def __init__(self, value: str) -> None:
        super().__init__("Invalid ISBN format. Must be ISBN-10 or ISBN-13")
        self.value = value


class NotFoundError(LibraryDomainError):
    """Base error for a referenced aggregate that does not exist."""


class BookNotFoundError(NotFoundError):
    """Raised when a book cannot be found."""

    def __init__(self, message: str = "Book is not found") -> None:
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    """Raised when a user cannot be found."""

    def __init__(self, message: str = "User is not found") -> None:
        super().__init__(message)


class LoanNotFoundError(NotFoundError):
    """Raised when a loan (or a set of loans) cannot be found."""

    def __init__(self, message: str = "Loan not found") -> None:
        super().__init__(message)


class UserAlreadyExistsError(LibraryDomainError):
    """Raised when an email address is already registered to another user."""

    def __init__(self, message: str = "User is already registered.") -> None:
        super().__init__(message)


class LoanBorrowDeniedError(LibraryDomainError):
    """Raised when a loan rule denies a borrow or a return.

    The reason is displayed to end users as-is, so it always names
    the specific rule that failed.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

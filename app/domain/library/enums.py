"""
Enumerations shared by the library entities and value objects.
"""

from enum import Enum


class UserType(str, Enum):
    """Borrower category. Drives the loan cap and the loan period."""

    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class LoanStatus(str, Enum):
    """Loan lifecycle state. RETURNED is terminal."""

    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"

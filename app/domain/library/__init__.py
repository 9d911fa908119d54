"""
Library bounded context: domain layer.

This module contains all domain logic for the library context:
- Value objects (Email, ISBN, LoanPeriod)
- Entities (Book, User, Loan) and their invariants
- Loan eligibility rules
- Repository ports and domain errors
"""

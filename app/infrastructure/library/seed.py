"""
Sample catalogue and members for local development.

Goes through the repository adapters so every record passes the same
validation as API input. Running it twice adds nothing new: books are
matched by ISBN and users by email.
"""

import logging
from dataclasses import dataclass
from uuid import uuid4

from sqlalchemy.engine import Engine

from app.domain.library.entities import Book, User
from app.domain.library.enums import UserType
from app.domain.library.value_objects import ISBN, Email
from app.infrastructure.library.book_repository import BookRepositoryAdapter
from app.infrastructure.library.database import create_schema
from app.infrastructure.library.user_repository import UserRepositoryAdapter

logger = logging.getLogger(__name__)

SAMPLE_BOOKS = [
    {
        "isbn": "978-0-13-468599-1",
        "title": "Clean Code",
        "author": "Robert C. Martin",
        "publication_year": 2008,
        "category": "Software Engineering",
        "copies": 3,
    },
    {
        "isbn": "978-0-201-63361-0",
        "title": "Design Patterns",
        "author": "Gang of Four",
        "publication_year": 1994,
        "category": "Software Engineering",
        "copies": 2,
    },
    {
        "isbn": "978-0-13-235088-4",
        "title": "Clean Architecture",
        "author": "Robert C. Martin",
        "publication_year": 2017,
        "category": "Software Architecture",
        "copies": 5,
    },
]

SAMPLE_USERS = [
    {"name": "John Doe", "email": "john.student@example.com", "type": UserType.STUDENT},
    {"name": "Jane Smith", "email": "jane.teacher@example.com", "type": UserType.TEACHER},
    {"name": "Admin User", "email": "admin@example.com", "type": UserType.ADMIN},
]


@dataclass(frozen=True)
class SeedResult:
    """How many sample records were inserted."""

    books: int
    users: int


def seed(engine: Engine) -> SeedResult:
    """Create the schema if needed and insert the sample books and users."""
    create_schema(engine)
    book_repo = BookRepositoryAdapter(engine)
    user_repo = UserRepositoryAdapter(engine)

    books_added = 0
    for item in SAMPLE_BOOKS:
        if book_repo.find_by_isbn(item["isbn"]) is not None:
            logger.info("Seed: book %s already present", item["isbn"])
            continue
        book_repo.save(
            Book(
                id=str(uuid4()),
                isbn=ISBN.create(item["isbn"]),
                title=item["title"],
                author=item["author"],
                publication_year=item["publication_year"],
                category=item["category"],
                available_copies=item["copies"],
                total_copies=item["copies"],
            )
        )
        books_added += 1

    users_added = 0
    for item in SAMPLE_USERS:
        if user_repo.find_by_email(item["email"]) is not None:
            logger.info("Seed: user %s already present", item["type"].value)
            continue
        user_repo.save(
            User(
                id=str(uuid4()),
                name=item["name"],
                email=Email.create(item["email"]),
                type=item["type"],
            )
        )
        users_added += 1

    logger.info("Seed: created %d books and %d users", books_added, users_added)
    return SeedResult(books=books_added, users=users_added)

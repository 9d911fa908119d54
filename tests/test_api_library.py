"""
Tests for the library API endpoints.

Drives the real use cases and adapters through FastAPI's TestClient
against an in-memory SQLite database.
Validates request validation, response schemas, and error mapping.
"""

from datetime import datetime, timedelta

import pytest

from app.core.config import settings
from app.shared.security.rate_limiting import limiter

BOOKS = "/api/v1/books"
USERS = "/api/v1/users"
LOANS = "/api/v1/loans"


def _parse(timestamp: str) -> datetime:
    return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))


def _create_book(client, isbn: str = "978-0-13-468599-1", copies: int = 3) -> dict:
    response = client.post(
        BOOKS,
        json={
            "isbn": isbn,
            "title": "Clean Code",
            "author": "Robert C. Martin",
            "publication_year": 2008,
            "category": "Software Engineering",
            "available_copies": copies,
            "total_copies": copies,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def _create_user(client, email: str = "john@example.com", user_type: str = "STUDENT") -> dict:
    response = client.post(USERS, json={"name": "John Doe", "email": email, "type": user_type})
    assert response.status_code == 201, response.text
    return response.json()


def _borrow(client, book_id: str, user_id: str):
    return client.post(LOANS, json={"book_id": book_id, "user_id": user_id})


class TestBooksEndpoints:
    """Tests for /api/v1/books."""

    def test_create_and_get(self, client) -> None:
        book = _create_book(client)

        response = client.get(f"{BOOKS}/{book['id']}")
        assert response.status_code == 200
        assert response.json()["isbn"] == "978-0-13-468599-1"

        by_isbn = client.get(f"{BOOKS}/isbn/978-0-13-468599-1")
        assert by_isbn.json()["id"] == book["id"]

    def test_invalid_isbn_checksum(self, client) -> None:
        response = client.post(
            BOOKS,
            json={
                "isbn": "978-0-13-468599-2",
                "title": "Clean Code",
                "author": "Robert C. Martin",
                "publication_year": 2008,
                "category": "Software Engineering",
                "available_copies": 1,
                "total_copies": 1,
            },
        )
        assert response.status_code == 422
        assert response.json() == {
            "error": "Validation error",
            "detail": "Invalid ISBN format. Must be ISBN-10 or ISBN-13",
        }

    def test_available_exceeding_total_rejected(self, client) -> None:
        response = client.post(
            BOOKS,
            json={
                "isbn": "0-306-40615-2",
                "title": "T",
                "author": "A",
                "publication_year": 1990,
                "category": "C",
                "available_copies": 3,
                "total_copies": 2,
            },
        )
        assert response.status_code == 422
        assert response.json()["detail"] == "Available copies cannot exceed total copies"

    def test_partial_update(self, client) -> None:
        book = _create_book(client)

        response = client.put(f"{BOOKS}/{book['id']}", json={"title": "Clean Code 2e"})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Clean Code 2e"
        assert body["author"] == "Robert C. Martin"

    def test_missing_book(self, client) -> None:
        response = client.get(f"{BOOKS}/missing")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found", "detail": "Book is not found"}

    def test_delete(self, client) -> None:
        book = _create_book(client)
        assert client.delete(f"{BOOKS}/{book['id']}").status_code == 204
        assert client.get(f"{BOOKS}/{book['id']}").status_code == 404
        assert client.delete(f"{BOOKS}/{book['id']}").status_code == 404


class TestUsersEndpoints:
    """Tests for /api/v1/users."""

    def test_create_normalizes_email(self, client) -> None:
        user = _create_user(client, email="John@Example.COM", user_type="TEACHER")
        assert user["email"] == "john@example.com"
        assert user["max_active_loans"] == 5

        response = client.get(f"{USERS}/email/JOHN@example.com")
        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    def test_get_by_mixed_case_email(self, client) -> None:
        user = _create_user(client, email="mixed.case@example.com")

        response = client.get(f"{USERS}/email/Mixed.Case@Example.COM")

        assert response.status_code == 200
        assert response.json()["id"] == user["id"]
        assert response.json()["email"] == "mixed.case@example.com"

    def test_get_by_unknown_email(self, client) -> None:
        response = client.get(f"{USERS}/email/nobody@example.com")
        assert response.status_code == 404
        assert response.json()["detail"] == "User is not found"

    def test_duplicate_email_conflict(self, client) -> None:
        _create_user(client)
        response = client.post(
            USERS, json={"name": "Other", "email": "JOHN@example.com", "type": "ADMIN"}
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "User is already registered."

    def test_invalid_email(self, client) -> None:
        response = client.post(
            USERS, json={"name": "Ann", "email": "ann@example", "type": "STUDENT"}
        )
        assert response.status_code == 422
        assert response.json()["detail"] == "Invalid email format"

    def test_unknown_user_type_rejected_by_schema(self, client) -> None:
        response = client.post(
            USERS, json={"name": "Ann", "email": "ann@example.com", "type": "LIBRARIAN"}
        )
        assert response.status_code == 422

    def test_update_email_taken(self, client) -> None:
        _create_user(client, email="taken@example.com")
        user = _create_user(client, email="free@example.com")

        response = client.put(f"{USERS}/{user['id']}", json={"email": "Taken@example.com"})
        assert response.status_code == 409

    def test_update_missing_user(self, client) -> None:
        response = client.put(f"{USERS}/missing", json={"name": "X"})
        assert response.status_code == 404


class TestLoansEndpoints:
    """Tests for /api/v1/loans."""

    def test_borrow_decrements_availability(self, client) -> None:
        book = _create_book(client, copies=3)
        user = _create_user(client)

        response = _borrow(client, book["id"], user["id"])

        assert response.status_code == 201
        loan = response.json()
        assert loan["status"] == "ACTIVE"
        assert loan["user_type"] == "STUDENT"
        assert loan["return_date"] is None
        assert loan["current_fine"] == 0
        due = _parse(loan["expected_return_date"]) - _parse(loan["loan_date"])
        assert due == timedelta(days=14)

        availability = client.get(f"{BOOKS}/{book['id']}/availability").json()
        assert availability["available_copies"] == 2
        assert availability["is_available"] is True

    def test_return_with_fine_then_second_return_denied(self, client) -> None:
        book = _create_book(client, copies=1)
        user = _create_user(client)
        loan = _borrow(client, book["id"], user["id"]).json()
        returned_at = _parse(loan["expected_return_date"]) + timedelta(days=5)

        response = client.post(
            f"{LOANS}/return",
            json={"loan_id": loan["id"], "return_date": returned_at.isoformat()},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["fine"] == pytest.approx(7.5)
        assert body["loan"]["status"] == "RETURNED"
        assert body["loan"]["current_fine"] == pytest.approx(7.5)
        assert client.get(f"{BOOKS}/{book['id']}").json()["available_copies"] == 1

        again = client.post(f"{LOANS}/return", json={"loan_id": loan["id"]})
        assert again.status_code == 400
        assert again.json() == {"error": "Loan denied", "detail": "Loan is already returned"}
        assert client.get(f"{BOOKS}/{book['id']}").json()["available_copies"] == 1

    def test_student_cap(self, client) -> None:
        book = _create_book(client, copies=5)
        user = _create_user(client)

        for _ in range(3):
            assert _borrow(client, book["id"], user["id"]).status_code == 201

        response = _borrow(client, book["id"], user["id"])
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "User has reached maximum active loans (3 for STUDENT)"
        )
        assert client.get(f"{BOOKS}/{book['id']}").json()["available_copies"] == 2

    def test_no_copies(self, client) -> None:
        book = _create_book(client, copies=1)
        first = _create_user(client, email="first@example.com")
        second = _create_user(client, email="second@example.com")

        assert _borrow(client, book["id"], first["id"]).status_code == 201
        response = _borrow(client, book["id"], second["id"])
        assert response.status_code == 400
        assert response.json()["detail"] == "Book has no available copies"

    def test_sweep_blocks_further_borrowing(self, client) -> None:
        book = _create_book(client, copies=3)
        user = _create_user(client)
        loan = _borrow(client, book["id"], user["id"]).json()

        sweep = client.post(f"{LOANS}/overdue/sweep", params={"as_of": "2100-01-01T00:00:00Z"})
        assert sweep.status_code == 200
        marked = sweep.json()["marked"]
        assert [m["id"] for m in marked] == [loan["id"]]
        assert marked[0]["status"] == "OVERDUE"

        response = _borrow(client, book["id"], user["id"])
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "User has overdue loans and cannot borrow more books until they are returned"
        )

        returned = client.post(f"{LOANS}/return", json={"loan_id": loan["id"]})
        assert returned.status_code == 200
        assert _borrow(client, book["id"], user["id"]).status_code == 201

    def test_sweep_without_due_loans(self, client) -> None:
        book = _create_book(client)
        user = _create_user(client)
        _borrow(client, book["id"], user["id"])

        sweep = client.post(f"{LOANS}/overdue/sweep")
        assert sweep.status_code == 200
        assert sweep.json()["marked"] == []

    def test_borrow_unknown_book_or_user(self, client) -> None:
        user = _create_user(client)
        book = _create_book(client)

        missing_book = _borrow(client, "missing", user["id"])
        assert missing_book.status_code == 404
        assert missing_book.json()["detail"] == "Book is not found"

        missing_user = _borrow(client, book["id"], "missing")
        assert missing_user.status_code == 404
        assert missing_user.json()["detail"] == "User is not found"

    def test_loan_history(self, client) -> None:
        book = _create_book(client)
        user = _create_user(client)

        empty = client.get(f"{LOANS}/user/{user['id']}")
        assert empty.status_code == 404
        assert empty.json()["detail"] == "User doesn't have associated loans"

        loan = _borrow(client, book["id"], user["id"]).json()
        by_user = client.get(f"{LOANS}/user/{user['id']}").json()
        by_book = client.get(f"{LOANS}/book/{book['id']}").json()
        assert [l["id"] for l in by_user] == [loan["id"]]
        assert [l["id"] for l in by_book] == [loan["id"]]
        assert client.get(f"{LOANS}/{loan['id']}").json()["days_until_due"] == 14
        assert len(client.get(LOANS).json()) == 1

    def test_delete_loan(self, client) -> None:
        book = _create_book(client)
        user = _create_user(client)
        loan = _borrow(client, book["id"], user["id"]).json()

        assert client.delete(f"{LOANS}/{loan['id']}").status_code == 204
        response = client.get(f"{LOANS}/{loan['id']}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Loan not found"

    def test_return_unknown_loan(self, client) -> None:
        response = client.post(f"{LOANS}/return", json={"loan_id": "missing"})
        assert response.status_code == 404


class TestRateLimiting:
    """Tests for slowapi limits on the loan endpoints."""

    @pytest.fixture
    def enabled_limiter(self, monkeypatch):
        monkeypatch.setattr(limiter, "enabled", True)
        limiter.reset()
        yield limiter
        limiter.reset()

    def test_sweep_over_limit_returns_429(self, client, enabled_limiter) -> None:
        allowed = int(settings.rate_limit_heavy.split("/")[0])
        for _ in range(allowed):
            assert client.post(f"{LOANS}/overdue/sweep").status_code == 200

        response = client.post(f"{LOANS}/overdue/sweep")

        assert response.status_code == 429
        body = response.json()
        assert body["error"] == "Rate limit exceeded"
        assert body["detail"]

"""
Adapter: User repository.

Implements UserRepository port on the ``users`` table.
Emails are stored lowercase, so lookups normalize their argument.
The unique index on ``email`` backs the use cases' uniqueness check:
a concurrent duplicate surfaces as UserAlreadyExistsError.
"""

import logging
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError

from app.domain.library.entities import User
from app.domain.library.errors import UserAlreadyExistsError, UserNotFoundError
from app.domain.library.ports import UserRepository
from app.domain.library.value_objects import Email
from app.infrastructure.library.database import users_table

logger = logging.getLogger(__name__)


def _row_to_user(row: Row) -> User:
    return User(id=row.id, name=row.name, email=Email(row.email), type=row.type)


class UserRepositoryAdapter(UserRepository):
    """SQLAlchemy implementation of the user repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def find_by_id(self, user_id: str) -> Optional[User]:
        query = select(users_table).where(users_table.c.id == user_id)
        with self._engine.connect() as conn:
            row = conn.execute(query).first()
        return _row_to_user(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        query = select(users_table).where(users_table.c.email == email.lower())
        with self._engine.connect() as conn:
            row = conn.execute(query).first()
        return _row_to_user(row) if row else None

    def save(self, user: User) -> User:
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    insert(users_table).values(
                        id=user.id,
                        name=user.name,
                        email=user.email.value,
                        type=user.type.value,
                    )
                )
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc
        logger.debug("Saved user: id=%s", user.id)
        return user

    def update(self, user: User) -> User:
        stmt = (
            update(users_table)
            .where(users_table.c.id == user.id)
            .values(name=user.name, email=user.email.value, type=user.type.value)
        )
        try:
            with self._engine.begin() as conn:
                result = conn.execute(stmt)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc
        if result.rowcount == 0:
            raise UserNotFoundError()
        logger.debug("Updated user: id=%s", user.id)
        return user

    def find_all(self) -> list[User]:
        query = select(users_table).order_by(users_table.c.name)
        with self._engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_user(r) for r in rows]

    def delete(self, user_id: str) -> None:
        with self._engine.begin() as conn:
            result = conn.execute(delete(users_table).where(users_table.c.id == user_id))
        if result.rowcount == 0:
            raise UserNotFoundError()

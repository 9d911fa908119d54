"""
Use cases: Library member management.

Failure cases: UserNotFoundError, UserAlreadyExistsError, DomainValidationError.
Email addresses are unique case-insensitively across all users.
"""

import logging
from uuid import uuid4

from app.application.library.dtos import CreateUserCommand, UpdateUserCommand
from app.domain.library.entities import User
from app.domain.library.errors import UserAlreadyExistsError, UserNotFoundError
from app.domain.library.ports import UserRepository
from app.domain.library.value_objects import Email

logger = logging.getLogger(__name__)


class CreateUserUseCase:
    """Registers a user once the email is known to be free."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, command: CreateUserCommand) -> User:
        email = Email.create(command.email)
        if self._user_repo.find_by_email(email.value) is not None:
            logger.warning("Registration rejected: email already in use")
            raise UserAlreadyExistsError()

        user = User(id=str(uuid4()), name=command.name, email=email, type=command.type)
        saved = self._user_repo.save(user)
        logger.info("User registered: user=%s type=%s", saved.id, saved.type.value)
        return saved


class GetUserByIdUseCase:
    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, user_id: str) -> User:
        user = self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user


class GetUserByEmailUseCase:
    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, email: str) -> User:
        user = self._user_repo.find_by_email(email)
        if user is None:
            raise UserNotFoundError()
        return user


class ListUsersUseCase:
    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self) -> list[User]:
        return self._user_repo.find_all()


class UpdateUserUseCase:
    """Applies a partial update to a user.

    A changed email must not belong to any other user.
    """

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, command: UpdateUserCommand) -> User:
        current = self._user_repo.find_by_id(command.user_id)
        if current is None:
            raise UserNotFoundError()

        if command.email is not None:
            new_email = Email.create(command.email)
            if new_email != current.email:
                owner = self._user_repo.find_by_email(new_email.value)
                if owner is not None and owner.id != current.id:
                    logger.warning("Update rejected: email already in use")
                    raise UserAlreadyExistsError()

        updated = current.update_user(
            name=command.name, email=command.email, type=command.type
        )
        self._user_repo.update(updated)
        logger.info("User updated: user=%s", updated.id)
        return updated


class DeleteUserUseCase:
    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, user_id: str) -> None:
        self._user_repo.delete(user_id)
        logger.info("User deleted: user=%s", user_id)

"""User Service — existence checks, duplicate checks, and password hashing for users.

Invariants:
    - get/update/delete raise ResourceNotFoundError before any store mutation
    - Ids outside the id column range are NotFound without touching the store
    - create checks email, then username, before the insert
    - A UNIQUE violation from a concurrent writer is re-diagnosed into the same
      DuplicateEmailError/DuplicateUsernameError the pre-check would have raised
    - Passwords are hashed here; repositories only ever see hashes
    - Every successful mutation re-reads the row and returns the fresh dict

Design Decisions:
    - Pre-check + store UNIQUE constraint: the pre-check gives a precise error in the
      common case, the constraint closes the check-then-insert race
    - Depends on UserRepositoryLike, not UserRepository: tests can hand in fakes
"""

import logging
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from userhub.core.errors import (
    ConstraintViolationError,
    DeleteFailedError,
    DuplicateEmailError,
    DuplicateUsernameError,
    InternalInconsistencyError,
    ResourceNotFoundError,
    UpdateFailedError,
    ValidationFailedError,
)
from userhub.core.pagination import DEFAULT_LIMIT, DEFAULT_OFFSET
from userhub.core.repository_protocols import UserRepositoryLike
from userhub.core.validation import is_storable_id, is_valid_email
from userhub.infrastructure.passwords import PasswordHasher
from userhub.repositories.user import UserRepository

logger = logging.getLogger(__name__)

_default_hasher = PasswordHasher()


class UserService:
    """Business rules for the user entity."""

    def __init__(
        self,
        repository: UserRepositoryLike,
        hasher: PasswordHasher | None = None,
    ):
        self._repo = repository
        self._hasher = hasher or _default_hasher

    async def get_user_by_id(self, user_id: int) -> dict:
        logger.info(f"Getting user with ID: {user_id}", extra={"user_id": user_id})
        return await self._require_user(user_id)

    async def get_all_users(
        self, limit: int = DEFAULT_LIMIT, offset: int = DEFAULT_OFFSET,
    ) -> list[dict]:
        logger.info(f"Getting all users (limit: {limit}, offset: {offset})")
        return await self._repo.find_all(limit, offset)

    async def create_user(self, username: str, email: str, password: str) -> dict:
        logger.info(f"Creating new user: {username}")
        self._check_email(email)

        if await self._repo.find_by_email(email):
            raise DuplicateEmailError()
        if await self._repo.find_by_username(username):
            raise DuplicateUsernameError()

        try:
            user_id = await self._repo.create_user(
                username, email, self._hasher.hash(password),
            )
        except ConstraintViolationError:
            await self._raise_if_taken(username=username, email=email)
            raise

        user = await self._repo.find_by_id(user_id)
        if not user:
            raise InternalInconsistencyError("Failed to create user")
        return user

    async def update_user(self, user_id: int, fields: Mapping[str, Any]) -> dict:
        logger.info(f"Updating user with ID: {user_id}", extra={"user_id": user_id})
        await self._require_user(user_id)

        changes = dict(fields)
        if "email" in changes:
            self._check_email(changes["email"])
        if "password" in changes:
            changes["password"] = self._hasher.hash(changes["password"])

        try:
            updated = await self._repo.update(user_id, changes)
        except ConstraintViolationError:
            await self._raise_if_taken(
                username=changes.get("username"),
                email=changes.get("email"),
                exclude_id=user_id,
            )
            raise
        if not updated:
            raise UpdateFailedError("User")

        user = await self._repo.find_by_id(user_id)
        if not user:
            raise InternalInconsistencyError("Failed to retrieve updated user")
        return user

    async def change_password(self, user_id: int, new_password: str) -> None:
        logger.info(
            f"Changing password for user with ID: {user_id}",
            extra={"user_id": user_id},
        )
        await self._require_user(user_id)
        if not new_password:
            raise ValidationFailedError("Password is required", field_name="password")
        if not await self._repo.update_password(
            user_id, self._hasher.hash(new_password),
        ):
            raise UpdateFailedError("User")

    async def delete_user(self, user_id: int) -> None:
        logger.info(f"Deleting user with ID: {user_id}", extra={"user_id": user_id})
        await self._require_user(user_id)
        if not await self._repo.delete_by_id(user_id):
            raise DeleteFailedError("User")

    async def get_user_count(self) -> int:
        logger.info("Getting user count")
        return await self._repo.count()

    def verify_password(self, user: Mapping[str, Any], plain: str) -> bool:
        return self._hasher.verify(plain, user["password"])

    async def _require_user(self, user_id: int) -> dict:
        if not is_storable_id(user_id):
            raise ResourceNotFoundError("User", user_id)
        user = await self._repo.find_by_id(user_id)
        if not user:
            raise ResourceNotFoundError("User", user_id)
        return user

    def _check_email(self, email: str) -> None:
        if not is_valid_email(email):
            raise ValidationFailedError("Invalid email format", field_name="email")

    async def _raise_if_taken(
        self,
        username: str | None,
        email: str | None,
        exclude_id: int | None = None,
    ) -> None:
        """Translate a UNIQUE violation into the matching duplicate error, if any."""
        if email:
            owner = await self._repo.find_by_email(email)
            if owner and owner["id"] != exclude_id:
                raise DuplicateEmailError()
        if username:
            owner = await self._repo.find_by_username(username)
            if owner and owner["id"] != exclude_id:
                raise DuplicateUsernameError()


def build_user_service(db: AsyncSession) -> UserService:
    """Wire a UserService onto one database session."""
    return UserService(UserRepository(db))

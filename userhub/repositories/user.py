"""User Repository — user-specific lookups on top of BaseRepository."""

from sqlalchemy.ext.asyncio import AsyncSession

from userhub.models.user import User
from userhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Data-access layer for users."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def find_by_email(self, email: str) -> dict | None:
        return await self.find_one_by("email", email)

    async def find_by_username(self, username: str) -> dict | None:
        return await self.find_one_by("username", username)

    async def create_user(self, username: str, email: str, password: str) -> int:
        """Insert a user; ``password`` must already be hashed."""
        return await self.create(
            {"username": username, "email": email, "password": password},
        )

    async def update_password(self, entity_id: int, new_password: str) -> bool:
        return await self.update(entity_id, {"password": new_password})

    async def count(self) -> int:
        rows = await self.raw_query(
            f"SELECT COUNT(*) AS count FROM {self.table_name}",
        )
        return int(rows[0]["count"])

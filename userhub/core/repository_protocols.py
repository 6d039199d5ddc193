"""Boundary Protocols — contracts between the service layer and persistence.

Invariants:
    - Services depend on these Protocols, never on a concrete repository class
    - Rows cross the boundary as plain dicts keyed by column name

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes in tests need no inheritance
    - Async in Protocol: implementations do IO
"""

from typing import Any, Mapping, Protocol


class UserRepositoryLike(Protocol):
    """Contract for user persistence — implemented by repositories/user.py."""
    async def find_by_id(self, entity_id: int) -> dict | None: ...
    async def find_all(self, limit: int = 100, offset: int = 0) -> list[dict]: ...
    async def find_by_email(self, email: str) -> dict | None: ...
    async def find_by_username(self, username: str) -> dict | None: ...
    async def create_user(self, username: str, email: str, password: str) -> int: ...
    async def update(self, entity_id: int, fields: Mapping[str, Any]) -> bool: ...
    async def update_password(self, entity_id: int, new_password: str) -> bool: ...
    async def delete_by_id(self, entity_id: int) -> bool: ...
    async def count(self) -> int: ...

"""User Schemas — payload shapes shared by the HTTP routes and socket events.

Invariants:
    - UserCreate.require_complete() is the only presence check for creation
    - UserUpdate exposes just the mutable columns; id and timestamps are never writable
    - serialize_user() drops password and renders timestamps as createdAt/updatedAt

Design Decisions:
    - Optional fields on UserCreate: a missing field is a domain ValidationFailedError
      with one fixed message, not a per-field Pydantic error
    - extra="ignore" on UserUpdate: clients may echo back a full user object
"""

from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from userhub.core.errors import ValidationFailedError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class UserCreate(BaseModel):
    """User creation payload — presence is checked by require_complete()."""
    username: str | None = None
    email: str | None = None
    password: str | None = None

    def require_complete(self) -> tuple[str, str, str]:
        if not (self.username and self.email and self.password):
            raise ValidationFailedError(
                "Username, email, and password are required",
            )
        return self.username, self.email, self.password


class UserUpdate(BaseModel):
    """Partial user update — only fields actually sent are applied."""
    model_config = ConfigDict(extra="ignore")

    username: str | None = None
    email: str | None = None
    password: str | None = None

    def changes(self) -> dict[str, str]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class UserResponse(BaseModel):
    """Public user representation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    username: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


def serialize_user(row: dict) -> dict:
    return UserResponse.model_validate(row).model_dump(mode="json", by_alias=True)


# --- Socket payloads ----------------------------------------------------------

class UserIdPayload(BaseModel):
    id: int


class UserListPayload(BaseModel):
    """Raw pagination values; clamp_pagination() does the parsing."""
    limit: Any = None
    offset: Any = None


class UserUpdatePayload(BaseModel):
    id: int
    updates: UserUpdate = Field(default_factory=UserUpdate)


def parse_payload(schema: type[SchemaT], payload: Any) -> SchemaT:
    """Validate an untyped payload, mapping Pydantic errors to ValidationFailedError."""
    try:
        return schema.model_validate(payload if payload is not None else {})
    except ValidationError as e:
        first = e.errors()[0]
        field_name = ".".join(str(loc) for loc in first["loc"]) or None
        message = (
            f"Invalid {field_name}: {first['msg']}" if field_name
            else f"Invalid payload: {first['msg']}"
        )
        raise ValidationFailedError(message, field_name=field_name) from e

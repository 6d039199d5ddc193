"""User ORM — the single persisted entity.

Invariants:
    - id is an integer surrogate key assigned by the store, never updated
    - username and email are UNIQUE at the store as well as pre-checked by the service
    - password holds a salted hash, never the plaintext
    - updated_at refreshes on every UPDATE issued through SQLAlchemy

Design Decisions:
    - Python-side timestamp defaults: Core insert()/update() apply them,
      so repositories need not pass timestamps explicitly
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from userhub.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Application user."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    username: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )

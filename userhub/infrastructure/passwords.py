"""Password Hashing — salted slow hashes via passlib.

Invariants:
    - Plaintext passwords never reach the store
    - verify() never raises on a malformed hash; it answers False

Design Decisions:
    - pbkdf2_sha256 scheme: pure-Python in passlib, no native bcrypt build needed
    - CryptContext(deprecated="auto") so a future scheme swap re-hashes transparently
"""

from passlib.context import CryptContext


class PasswordHasher:
    """Thin wrapper around a passlib CryptContext."""

    def __init__(self, schemes: list[str] | None = None):
        self._context = CryptContext(
            schemes=schemes or ["pbkdf2_sha256"], deprecated="auto",
        )

    def hash(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        try:
            return self._context.verify(plain, hashed)
        except ValueError:
            return False

"""Field checks shared by the service layer."""

import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# users.id is a 32-bit INTEGER on every supported store
MAX_STORED_ID = 2**31 - 1


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(email))


def is_storable_id(value: int) -> bool:
    """True when value fits the id column; ids outside it can never match a row."""
    return 1 <= value <= MAX_STORED_ID

"""Pagination Clamp — the one place limit/offset are parsed and bounded.

Invariants:
    - limit always lands in [MIN_LIMIT, MAX_LIMIT]
    - offset lands in [0, MAX_OFFSET]
    - Strings are read by their leading integer ("10abc" → 10, "1.5" → 1)
    - Missing or unparseable values fall back to the defaults, never raise

Design Decisions:
    - Shared by the HTTP and socket adapters so the bounds cannot drift apart
"""

import re

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")

DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0
MIN_LIMIT = 1
MAX_LIMIT = 1000
# no page past the largest storable id can hold rows
MAX_OFFSET = 2**31 - 1


def _parse_int(value: object, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        return int(match.group(1)) if match else default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def clamp_pagination(limit: object = None, offset: object = None) -> tuple[int, int]:
    """Parse raw limit/offset (query strings, JSON numbers, None) into safe bounds."""
    parsed_limit = _parse_int(limit, DEFAULT_LIMIT)
    parsed_offset = _parse_int(offset, DEFAULT_OFFSET)
    return (
        min(max(parsed_limit, MIN_LIMIT), MAX_LIMIT),
        min(max(parsed_offset, 0), MAX_OFFSET),
    )

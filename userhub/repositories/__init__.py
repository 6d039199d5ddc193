"""Repositories — data access over SQLAlchemy Core, one class per table.

Invariants:
    - Repositories receive their AsyncSession at construction (no global pool access)
    - Rows leave this layer as plain dicts
    - Column identifiers come only from the mapped table; values are always bound
"""

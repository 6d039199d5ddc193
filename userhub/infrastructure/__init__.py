"""Infrastructure Layer — database engine, logging, password hashing.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Resources are constructed explicitly and owned by the app lifespan
"""

"""UserHub Application Package — user CRUD over HTTP and Socket.IO.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""

"""API Layer — FastAPI routes, Socket.IO events, and error handlers.

Invariants:
    - Routes and events registered explicitly in main.py (no auto-discovery)
    - Every HTTP response body is the {success, data?, message?, error?} envelope

Design Decisions:
    - Thin transports delegate to services; neither transport holds business rules
"""

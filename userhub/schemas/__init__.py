"""Pydantic Schemas — request/response validation for HTTP and socket payloads.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Response schemas never carry the password column

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""

"""Socket Event Modules — one handler class per resource, registered in main.py.

Invariants:
    - A handler's return value is the client's acknowledgement payload
    - Acks are {success, data?} or {success: false, error}; no HTTP status codes
"""

"""Services Layer — business rules shared by every transport.

Invariants:
    - Services never import from api/ (transports depend on services, not vice versa)
    - Every rule violation is raised as a UserHubError subclass

Design Decisions:
    - One service per entity; HTTP routes and socket events call the same methods
"""

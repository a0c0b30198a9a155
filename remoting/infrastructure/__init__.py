"""Infrastructure Layer — outbound HTTP client and cross-cutting concerns.

Invariants:
    - External calls map every transport failure onto core/errors.py types
    - Logging configured once, here, for the whole process

Design Decisions:
    - Wrappers over raw httpx: callers never see httpx exceptions
"""

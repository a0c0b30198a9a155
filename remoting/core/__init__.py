"""Core Layer — contracts, routes, shapes and docs; no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: the Dispatcher and the
      proxy are both thin shells around the same registry
"""

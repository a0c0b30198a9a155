"""Services Layer — dispatcher and the Todos API bindings.

Invariants:
    - Dispatch uses an explicit dict mapping (no auto-discovery)
    - Services never import from api/
"""

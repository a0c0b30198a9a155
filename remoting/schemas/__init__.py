"""Pydantic Schemas — shapes that cross the wire.

Invariants:
    - Schemas validate at system boundary (operation payloads, docs responses)
"""

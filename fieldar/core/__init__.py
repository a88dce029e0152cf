"""Core Layer - pure domain logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic (document stamping aside)

Design Decisions:
    - Functional core separated from the filesystem shell
"""

"""Infrastructure Layer - blocking filesystem primitives and cross-cutting concerns.

Invariants:
    - Infrastructure never imports services/ or api/
    - Every OSError raised here is mapped to StorageIOError (core/errors.py)

Design Decisions:
    - Primitives stay synchronous; services/ decides what runs off the event loop
"""

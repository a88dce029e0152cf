"""FieldAR Machine Store - directory-backed persistence for annotated machine photos.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""

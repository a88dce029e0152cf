"""API Layer - FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON, except raw image and document bodies

Design Decisions:
    - Thin routes delegate to MachineStore
"""

"""Services Layer - async orchestration of core logic and filesystem primitives.

Invariants:
    - MachineStore is the only entry point the API layer talks to
    - AssetStore owns overlay image naming and listing

Design Decisions:
    - Services are plain objects built with an injected root, not module singletons
"""

"""API Dependencies - the MachineStore instance routes operate on.

Invariants:
    - One MachineStore per process, built from settings on first use
    - Tests override get_machine_store via app.dependency_overrides
"""

from functools import lru_cache

from fieldar.config import get_settings
from fieldar.services.machine_store import MachineStore


@lru_cache
def get_machine_store() -> MachineStore:
    return MachineStore.from_configured_root(get_settings().storage_root)

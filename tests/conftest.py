"""Root conftest - shared store fixtures.

Invariants:
    - Every test gets a fresh MachineStore rooted in its own tmp_path
    - No test ever touches the real Documents folder
"""

import pytest

from fieldar.core.asset_naming import PNG_SIGNATURE
from fieldar.services.machine_store import MachineStore


@pytest.fixture
def store(tmp_path):
    return MachineStore(tmp_path / "docs")


@pytest.fixture
def png_bytes():
    return PNG_SIGNATURE + b"\x00\x00\x00\rIHDR-fake-png-body"


@pytest.fixture
def jpeg_bytes():
    return b"\xff\xd8\xff\xe0\x00\x10JFIF-fake-jpeg-body"

"""Asset Naming - filename derivation for overlay images.

Invariants:
    - Extension comes from the suggested name (lowercased) when it has one,
      otherwise from the PNG signature sniff (png) with jpg as fallback
    - Base name is the suggested name's stem, or a fresh UUID when none given
    - Directory components and leading dots of a suggested name are discarded
    - candidate_names yields "<base>.<ext>", "<base>-1.<ext>", "<base>-2.<ext>", ...
"""

import uuid
from collections.abc import Iterator
from pathlib import PurePosixPath

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def is_png(data: bytes) -> bool:
    return data[:8] == PNG_SIGNATURE


def sniff_extension(data: bytes) -> str:
    return "png" if is_png(data) else "jpg"


def split_suggested_name(
    suggested_name: str | None, data: bytes,
) -> tuple[str, str]:
    """Return (base, extension) for a new overlay image."""
    if not suggested_name:
        return str(uuid.uuid4()).upper(), sniff_extension(data)
    # leading dots would make the stored file hidden from listings
    name = PurePosixPath(suggested_name.replace("\\", "/")).name.lstrip(".")
    path = PurePosixPath(name)
    ext = path.suffix[1:].lower()
    base = path.stem if ext else name
    if not base:
        base = str(uuid.uuid4()).upper()
    return base, ext or sniff_extension(data)


def candidate_names(base: str, ext: str) -> Iterator[str]:
    yield f"{base}.{ext}"
    counter = 1
    while True:
        yield f"{base}-{counter}.{ext}"
        counter += 1

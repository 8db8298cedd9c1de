"""NVRAM image loading and mirror verification."""
from __future__ import annotations

from pathlib import Path
from warnings import warn

from sr2_core.errors import ImageMissing
from sr2_core.layout import DEFAULT_LAYOUT, SaveLayout


def check_mirror(buffer: bytes, layout: SaveLayout = DEFAULT_LAYOUT) -> bool:
    """True when the main chunk is repeated byte-for-byte at +mirror_offset."""
    lo, hi = layout.chunk.start, layout.chunk.end
    mirror = buffer[lo + layout.mirror_offset:hi + layout.mirror_offset]
    return len(mirror) == hi - lo and mirror == buffer[lo:hi]


def read_nvram_bytes(path: Path, layout: SaveLayout = DEFAULT_LAYOUT) -> bytes:
    """Read the whole image. Short images and mirror mismatches only warn."""
    path = Path(path)
    if not path.is_file():
        raise ImageMissing(str(path))
    with open(path, "rb") as f:
        data = f.read()

    if len(data) < layout.chunk.end:
        warn(f"Image {path.name} is {len(data)} bytes, shorter than the main chunk end {layout.chunk.end:#06x}")
    elif not check_mirror(data, layout):
        warn(f"Image {path.name}: mirror at +{layout.mirror_offset:#x} does not match the main chunk")
    return data

"""Printable-ASCII rendering for name bytes and hex-dump gutters."""
from __future__ import annotations

PLACEHOLDER = "."


def safe_char(b: int) -> str:
    """Bytes 32-126 render as themselves, anything else as the placeholder."""
    b &= 0xFF
    return chr(b) if 32 <= b <= 126 else PLACEHOLDER


def safe_text(data: bytes) -> str:
    return "".join(safe_char(x) for x in data)

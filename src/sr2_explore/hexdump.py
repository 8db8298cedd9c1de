"""Hex dumps with an ASCII gutter and optional time-candidate annotations."""
from __future__ import annotations

from typing import Sequence

from sr2_core.chars import safe_text
from sr2_core.protocol import DEFAULT_ROW_WIDTH

from .patterns import RowOverlay


def format_row(buffer: bytes, start: int, end: int, row_width: int = DEFAULT_ROW_WIDTH) -> str:
    chunk = buffer[start:end]
    groups = [" ".join(f"{x:02X}" for x in chunk[k:k + 8]) for k in range(0, len(chunk), 8)]
    hexs = "  ".join(groups)
    width = row_width * 3 + (row_width - 1) // 8 - 1
    ascii_ = safe_text(chunk)
    return f"{start:04X}: {hexs:<{width}}  |{ascii_}|"


def hex_dump(
    buffer: bytes,
    start: int,
    end: int,
    row_width: int = DEFAULT_ROW_WIDTH,
    overlays: Sequence[RowOverlay] | None = None,
) -> list[str]:
    """Lines for [start, end), clamped to the buffer.

    With overlays, each row is followed by one line per selected candidate.
    """
    n = len(buffer)
    start = max(0, min(start, n))
    end = max(start, min(end, n))
    by_row = {o.start: o for o in overlays or ()}
    lines: list[str] = []
    for i in range(start, end, max(1, row_width)):
        row_end = min(end, i + row_width)
        lines.append(format_row(buffer, i, row_end, row_width))
        overlay = by_row.get(i)
        if overlay is None:
            continue
        for c in overlay.candidates:
            lines.append(f"      ^ {c.start:04X}+{c.length} {c.time} [{c.kind} score={c.score}]")
    return lines

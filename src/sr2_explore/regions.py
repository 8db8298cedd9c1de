"""Region scanning (blank/non-blank + landmark tags) and landmark-forward chopping."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence
from warnings import warn

from sr2_core.errors import OutOfRange
from sr2_core.layout import Landmark, Range
from sr2_core.protocol import BLANK_BYTE, DEFAULT_CHOP_LEN, DEFAULT_MIN_BLANK_LEN


@dataclass(frozen=True)
class Region:
    start: int
    end: int
    tags: tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class LandmarkRegion:
    label: str
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


def _clamp(buffer: bytes, bounds: Range | None) -> tuple[int, int]:
    n = len(buffer)
    if bounds is None:
        return 0, n
    start = max(0, min(bounds.start, n))
    return start, max(start, min(bounds.end, n))


# ---------------------------------------------------------------------------
# Blank / non-blank scanning
# ---------------------------------------------------------------------------

def blank_ranges(
    buffer: bytes,
    blank_byte: int = BLANK_BYTE,
    min_len: int = DEFAULT_MIN_BLANK_LEN,
    bounds: Range | None = None,
) -> list[Range]:
    """Maximal runs of `blank_byte` inside `bounds` that are at least `min_len` long.

    Shorter runs are dropped rather than merged, so a non-blank region may
    still contain short blank sub-runs.
    """
    start, end = _clamp(buffer, bounds)
    bb = blank_byte & 0xFF
    out: list[Range] = []
    run_start: int | None = None
    for i in range(start, end):
        if buffer[i] == bb:
            if run_start is None:
                run_start = i
        elif run_start is not None:
            if i - run_start >= min_len:
                out.append(Range(run_start, i))
            run_start = None
    if run_start is not None and end - run_start >= min_len:
        out.append(Range(run_start, end))
    return out


def complement(total_len: int, blanks: Iterable[Range], start: int = 0) -> list[Range]:
    """Ranges in [start, total_len) not covered by any of `blanks`."""
    out: list[Range] = []
    pos = start
    for r in sorted(blanks, key=lambda r: r.start):
        if pos < r.start:
            out.append(Range(pos, r.start))
        pos = max(pos, r.end)
    if pos < total_len:
        out.append(Range(pos, total_len))
    return out


def tag_region(region: Range | Region, landmarks: Iterable[Landmark]) -> list[str]:
    """Labels of landmarks lying within [start, end)."""
    return [lm.label for lm in landmarks if region.start <= lm.offset < region.end]


def region_summary(
    buffer: bytes,
    landmarks: Sequence[Landmark] = (),
    blank_byte: int = BLANK_BYTE,
    min_len: int = DEFAULT_MIN_BLANK_LEN,
    bounds: Range | None = None,
) -> list[Region]:
    """Non-blank regions inside `bounds`, sized and tagged with landmarks."""
    start, end = _clamp(buffer, bounds)
    blanks = blank_ranges(buffer, blank_byte, min_len, Range(start, end))
    return [
        Region(r.start, r.end, tuple(tag_region(r, landmarks)))
        for r in complement(end, blanks, start)
    ]


# ---------------------------------------------------------------------------
# Landmark-forward chopping
# ---------------------------------------------------------------------------

def next_blank_run(
    buffer: bytes,
    start: int,
    blank_byte: int = BLANK_BYTE,
    min_len: int = DEFAULT_CHOP_LEN,
    end: int | None = None,
) -> int | None:
    """Start of the first run of >= min_len `blank_byte` at or after `start`, or None."""
    n = len(buffer) if end is None else max(0, min(end, len(buffer)))
    bb = blank_byte & 0xFF
    need = max(1, min_len)
    run_start: int | None = None
    for i in range(max(0, min(start, n)), n):
        if buffer[i] == bb:
            if run_start is None:
                run_start = i
            if i - run_start + 1 >= need:
                return run_start
        else:
            run_start = None
    return None


def landmark_region(
    buffer: bytes,
    landmark: Landmark,
    blank_byte: int = BLANK_BYTE,
    min_len: int = DEFAULT_CHOP_LEN,
    end: int | None = None,
) -> Range:
    """[landmark.offset, next blank run) - or up to `end` when no run is found."""
    n = len(buffer) if end is None else max(0, min(end, len(buffer)))
    if not 0 <= landmark.offset < n:
        raise OutOfRange(f"landmark {landmark.label!r} at {landmark.offset:#06x} outside [0, {n:#06x})")
    stop = next_blank_run(buffer, landmark.offset, blank_byte, min_len, n)
    return Range(landmark.offset, n if stop is None else stop)


def landmark_regions(
    buffer: bytes,
    landmarks: Iterable[Landmark],
    blank_byte: int = BLANK_BYTE,
    min_len: int = DEFAULT_CHOP_LEN,
    end: int | None = None,
) -> list[LandmarkRegion]:
    n = len(buffer) if end is None else max(0, min(end, len(buffer)))
    out: list[LandmarkRegion] = []
    for lm in landmarks:
        if not 0 <= lm.offset < n:
            warn(f"Landmark {lm.label!r} at {lm.offset:#06x} lies outside the scanned bound. Skipping.")
            continue
        r = landmark_region(buffer, lm, blank_byte, min_len, n)
        out.append(LandmarkRegion(lm.label, r.start, r.end))
    return out

"""Heuristic detector for time-shaped byte windows in unmapped regions.

Two heuristics are run at every 6-byte window of every scan row:

- duplicate: bytes [i..i+2] and [i+3..i+5] are two 24-bit LE tick counts
  that decode to the same plausible centisecond value (score 1).
- record: byte i is the msb, bytes i+1..i+3 are a zero gap, byte i+4 is the
  lsb and byte i+5 the mid byte, matching the sector record shape (score 2).

Results are hypotheses for display and discovery only. The detector never
raises; nothing plausible simply means an empty result.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from sr2_core.protocol import (
    DEFAULT_ROW_WIDTH,
    PLAUSIBLE_MAX_CS,
    PLAUSIBLE_MIN_CS,
    TICKS_PER_CS,
    TIME_WINDOW_LEN,
)
from sr2_core.timecodec import cs_to_time, ticks_of

from .intervals import select_greedy

DUPLICATE = "duplicate"
RECORD = "record"

SCORES = {DUPLICATE: 1, RECORD: 2}


@dataclass(frozen=True)
class Band:
    """Inclusive plausibility band in centiseconds."""

    min_cs: int = PLAUSIBLE_MIN_CS
    max_cs: int = PLAUSIBLE_MAX_CS

    def __contains__(self, cs: int) -> bool:
        return self.min_cs <= cs <= self.max_cs


DEFAULT_BAND = Band()


@dataclass(frozen=True)
class Candidate:
    start: int
    centiseconds: int
    kind: str
    score: int
    length: int = TIME_WINDOW_LEN

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def time(self) -> str:
        return cs_to_time(self.centiseconds)

    @property
    def digits(self) -> str:
        return self.time.replace(":", "").replace(".", "")


@dataclass(frozen=True)
class RowOverlay:
    start: int
    end: int
    candidates: tuple[Candidate, ...] = field(default_factory=tuple)


def duplicate_at(buffer: bytes, i: int, band: Band = DEFAULT_BAND) -> Candidate | None:
    b = buffer
    first = ticks_of(b[i], b[i + 1], b[i + 2]) // TICKS_PER_CS
    second = ticks_of(b[i + 3], b[i + 4], b[i + 5]) // TICKS_PER_CS
    if first != second or first not in band:
        return None
    return Candidate(i, first, DUPLICATE, SCORES[DUPLICATE])


def record_at(buffer: bytes, i: int, band: Band = DEFAULT_BAND) -> Candidate | None:
    b = buffer
    if b[i + 1] or b[i + 2] or b[i + 3]:
        return None
    cs = ticks_of(b[i + 4], b[i + 5], b[i]) // TICKS_PER_CS
    if cs not in band:
        return None
    return Candidate(i, cs, RECORD, SCORES[RECORD])


HEURISTICS = (duplicate_at, record_at)


def row_candidates(buffer: bytes, row_start: int, row_end: int, band: Band = DEFAULT_BAND) -> list[Candidate]:
    """Every firing candidate whose full window fits in [row_start, row_end)."""
    row_start = max(0, row_start)
    row_end = min(row_end, len(buffer))
    out: list[Candidate] = []
    for i in range(row_start, row_end - TIME_WINDOW_LEN + 1):
        for heuristic in HEURISTICS:
            cand = heuristic(buffer, i, band)
            if cand is not None:
                out.append(cand)
    return out


def scan_rows(
    buffer: bytes,
    start: int,
    end: int,
    row_width: int = DEFAULT_ROW_WIDTH,
    band: Band = DEFAULT_BAND,
) -> list[RowOverlay]:
    """Split [start, end) into rows aligned to `start` and select an overlay per row."""
    start = max(0, start)
    end = min(end, len(buffer))
    if start >= end or row_width < TIME_WINDOW_LEN:
        return []
    overlays: list[RowOverlay] = []
    for row_start in range(start, end, row_width):
        row_end = min(end, row_start + row_width)
        selected = select_greedy(row_candidates(buffer, row_start, row_end, band))
        overlays.append(RowOverlay(row_start, row_end, tuple(selected)))
    return overlays


def detect(
    buffer: bytes,
    start: int,
    end: int,
    row_width: int = DEFAULT_ROW_WIDTH,
    band: Band = DEFAULT_BAND,
) -> list[Candidate]:
    """Selected candidates of every row in [start, end), in offset order."""
    return [c for row in scan_rows(buffer, start, end, row_width, band) for c in row.candidates]

"""Fixed-stride record table decoding, table families and sector times."""
from __future__ import annotations

from dataclasses import dataclass
from warnings import warn

from sr2_core.chars import safe_char
from sr2_core.errors import OutOfRange
from sr2_core.layout import Range, SaveLayout, TableSpec
from sr2_core.protocol import BLANK_BYTE, SECTOR_STRIDE, SECTOR_TERMINATOR_LEN, TICKS_PER_CS, TIME_WINDOW_LEN
from sr2_core.timecodec import TimeValue, cs_to_time, parse_time, ticks_of
from sr2_explore.regions import next_blank_run


@dataclass(frozen=True)
class Entry:
    index: int
    offset: int
    name: str
    lsb: int
    mid: int
    msb: int

    @property
    def ticks(self) -> int:
        return ticks_of(self.lsb, self.mid, self.msb)

    @property
    def centiseconds(self) -> int:
        return self.ticks // TICKS_PER_CS

    @property
    def time(self) -> str:
        return cs_to_time(self.centiseconds)

    def as_dict(self) -> dict:
        return {
            "entry": self.index,
            "offset": self.offset,
            "name": self.name,
            "time": self.time,
            "centiseconds": self.centiseconds,
            "ticks": self.ticks,
            "lsb": self.lsb,
            "mid": self.mid,
            "msb": self.msb,
        }


def _bounds(buffer: bytes, bounds: Range | None) -> Range:
    n = len(buffer)
    if bounds is None:
        return Range(0, n)
    start = min(bounds.start, n)
    return Range(start, max(start, min(bounds.end, n)))


def decode_table(buffer: bytes, spec: TableSpec, bounds: Range | None = None) -> list[Entry]:
    """Decode `spec.count` records starting at `spec.base`.

    The whole table is bounds-checked once up front, so a wrong layout
    hypothesis fails with OutOfRange instead of decoding partially.
    """
    if spec.count <= 0:
        return []
    lim = _bounds(buffer, bounds)
    if spec.first_offset < lim.start or spec.last_offset >= lim.end:
        raise OutOfRange(
            f"table {spec.label or hex(spec.base)} spans {spec.first_offset:#06x}..{spec.last_offset:#06x}, "
            f"bounds are [{lim.start:#06x}, {lim.end:#06x})"
        )

    n0, n1, n2 = spec.layout.name
    lo, mi, hi = spec.layout.time
    entries: list[Entry] = []
    for k in range(spec.count):
        off = spec.base + k * spec.stride
        name = safe_char(buffer[off + n0]) + safe_char(buffer[off + n1]) + safe_char(buffer[off + n2])
        entries.append(Entry(k, off, name, buffer[off + lo], buffer[off + mi], buffer[off + hi]))
    return entries


def championship_leaderboard(buffer: bytes, layout: SaveLayout) -> list[Entry]:
    return decode_table(buffer, layout.championship, layout.chunk)


def track_top3(buffer: bytes, layout: SaveLayout) -> dict[str, list[Entry]]:
    return {trk: decode_table(buffer, spec, layout.chunk) for trk, spec in layout.track_top3.items()}


def practice_top8(buffer: bytes, layout: SaveLayout) -> dict[str, list[Entry]]:
    return {trk: decode_table(buffer, spec, layout.chunk) for trk, spec in layout.practice_top8.items()}


# ---------------------------------------------------------------------------
# Sector times: [msb | 0 0 0 | lsb | mid | ? | 0] every 8 bytes
# ---------------------------------------------------------------------------

def sector_times(buffer: bytes, start: int, bounds: Range | None = None) -> list[TimeValue]:
    """Cumulative sector times from `start` up to the next 32-byte zero run."""
    lim = _bounds(buffer, bounds)
    if not lim.contains(start):
        raise OutOfRange(f"sector table at {start:#06x} outside [{lim.start:#06x}, {lim.end:#06x})")
    end = next_blank_run(buffer, start, BLANK_BYTE, SECTOR_TERMINATOR_LEN, lim.end)
    if end is None:
        warn(f"Sector table at {start:#06x} has no terminator before {lim.end:#06x}")
        end = lim.end
    return [
        TimeValue(ticks_of(buffer[i + 4], buffer[i + 5], buffer[i]))
        for i in range(start, end - TIME_WINDOW_LEN + 1, SECTOR_STRIDE)
    ]


def championship_sectors(buffer: bytes, layout: SaveLayout) -> dict[str, list[TimeValue]]:
    return {trk: sector_times(buffer, base, layout.chunk) for trk, base in layout.championship_sectors.items()}


def practice_sectors(buffer: bytes, layout: SaveLayout) -> dict[str, list[TimeValue]]:
    return {trk: sector_times(buffer, base, layout.chunk) for trk, base in layout.practice_sectors.items()}


def cumulative_to_splits(times: list[str]) -> list[str]:
    """Per-sector durations from cumulative MM:SS.cc times; non-positive deltas are dropped."""
    cs = [parse_time(t) for t in times]
    return [cs_to_time(b - a) for a, b in zip([0] + cs, cs) if b - a > 0]

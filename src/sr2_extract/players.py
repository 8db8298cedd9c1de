"""Player-level aggregation over decoded tables."""
from __future__ import annotations

from typing import Mapping, Sequence

from sr2_core.errors import FormatError
from sr2_core.timecodec import cs_to_time, parse_time

from .tables import Entry


def player_best_per_track(top3: Mapping[str, Sequence[Entry]], player: str) -> dict[str, Entry]:
    """Best (lowest) entry per track, for tracks where `player` appears."""
    best: dict[str, Entry] = {}
    for trk, entries in sorted(top3.items()):
        mine = [e for e in entries if e.name == player]
        if mine:
            best[trk] = min(mine, key=lambda e: e.centiseconds)
    return best


def potential_time(best: Mapping[str, Entry]) -> tuple[int, str]:
    total = sum(e.centiseconds for e in best.values())
    return total, cs_to_time(total)


def player_best_championship(entries: Sequence[Entry], player: str) -> Entry | None:
    mine = [e for e in entries if e.name == player]
    return min(mine, key=lambda e: e.centiseconds) if mine else None


def signed_diff(a_cs: int, b_cs: int) -> str:
    """a - b as +MM:SS.cc / -MM:SS.cc (no sign when equal)."""
    diff = a_cs - b_cs
    sign = "-" if diff < 0 else "+" if diff > 0 else ""
    return sign + cs_to_time(abs(diff))


def compare_top3(
    top3: Mapping[str, Sequence[Entry]],
    expected: Mapping[str, Sequence[str]],
) -> dict[str, dict]:
    """Tracks whose decoded times differ from `expected` ({track: [MM:SS.cc, ...]})."""
    diffs: dict[str, dict] = {}
    for trk, exp in sorted(expected.items()):
        if not isinstance(exp, (list, tuple)):
            raise FormatError(f"expected times for {trk!r} must be a list, got {exp!r}")
        # normalise through the codec so malformed expectations fail loudly
        exp_times = [cs_to_time(parse_time(t)) for t in exp]
        got = [e.time for e in top3.get(trk, [])]
        if exp_times != got:
            diffs[trk] = {"expected": exp_times, "got": got}
    return diffs

"""pandas views of decoded tables for reporting."""
from __future__ import annotations

from typing import Mapping, Sequence

import pandas as pd

from sr2_core.timecodec import TimeValue

from .tables import Entry, cumulative_to_splits

ENTRY_COLUMNS = ["table", "entry", "offset", "name", "time", "centiseconds", "ticks", "lsb", "mid", "msb"]


def entries_frame(entries: Sequence[Entry], table: str = "") -> pd.DataFrame:
    rows = [{"table": table, **e.as_dict()} for e in entries]
    return pd.DataFrame(rows, columns=ENTRY_COLUMNS)


def tracks_frame(by_track: Mapping[str, Sequence[Entry]], order: Sequence[str] = ()) -> pd.DataFrame:
    """One frame for {track: entries}, tracks in `order` first, then the rest by name."""
    tracks = [t for t in order if t in by_track] + sorted(t for t in by_track if t not in order)
    frames = [entries_frame(by_track[t], t) for t in tracks]
    if not frames:
        return pd.DataFrame(columns=ENTRY_COLUMNS)
    return pd.concat(frames, ignore_index=True)


def sectors_frame(
    by_track: Mapping[str, Sequence[TimeValue]],
    order: Sequence[str] = (),
    splits: bool = False,
) -> pd.DataFrame:
    rows = []
    tracks = [t for t in order if t in by_track] + sorted(t for t in by_track if t not in order)
    for trk in tracks:
        times = [tv.text for tv in by_track[trk]]
        if splits:
            times = cumulative_to_splits(times)
        rows.extend({"track": trk, "sector": k + 1, "time": t} for k, t in enumerate(times))
    return pd.DataFrame(rows, columns=["track", "sector", "time"])


def frame_text(df: pd.DataFrame) -> str:
    if df.empty:
        return "(no rows)"
    return df.to_string(index=False)

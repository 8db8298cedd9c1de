"""SR2 Extract - Settled NVRAM table extractors."""
from .image import check_mirror, read_nvram_bytes
from .tables import (
    Entry,
    championship_leaderboard,
    championship_sectors,
    cumulative_to_splits,
    decode_table,
    practice_sectors,
    practice_top8,
    sector_times,
    track_top3,
)

__all__ = [
    "check_mirror",
    "read_nvram_bytes",
    "Entry",
    "championship_leaderboard",
    "championship_sectors",
    "cumulative_to_splits",
    "decode_table",
    "practice_sectors",
    "practice_top8",
    "sector_times",
    "track_top3",
]

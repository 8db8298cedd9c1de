"""SR2 Explore - Region scanning and time-pattern discovery."""
from .intervals import select_greedy
from .patterns import Band, Candidate, RowOverlay, detect, row_candidates, scan_rows
from .regions import (
    LandmarkRegion,
    Region,
    blank_ranges,
    complement,
    landmark_region,
    landmark_regions,
    next_blank_run,
    region_summary,
    tag_region,
)

__all__ = [
    "select_greedy",
    "Band",
    "Candidate",
    "RowOverlay",
    "detect",
    "row_candidates",
    "scan_rows",
    "LandmarkRegion",
    "Region",
    "blank_ranges",
    "complement",
    "landmark_region",
    "landmark_regions",
    "next_blank_run",
    "region_summary",
    "tag_region",
]

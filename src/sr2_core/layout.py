"""Save-image layout: ranges, landmarks, table specs and the JSON overlay loader."""
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path

from . import protocol as P
from .errors import LayoutError


@dataclass(frozen=True)
class Range:
    """Half-open byte range [start, end)."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Inverted range [{self.start:#06x}, {self.end:#06x})")

    @property
    def size(self) -> int:
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def __str__(self) -> str:
        return f"{self.start:04x}->{self.end:04x}"


@dataclass(frozen=True)
class Landmark:
    offset: int
    label: str


@dataclass(frozen=True)
class FieldLayout:
    """Positions inside one record: three name bytes and time bytes as (lsb, mid, msb)."""

    name: tuple[int, int, int]
    time: tuple[int, int, int]

    @property
    def min_offset(self) -> int:
        return min(self.name + self.time)

    @property
    def max_offset(self) -> int:
        return max(self.name + self.time)


CHAMPIONSHIP = FieldLayout(P.CHAMPIONSHIP_NAME_OFFSETS, P.CHAMPIONSHIP_TIME_OFFSETS)
TOP3 = FieldLayout(P.TOP3_NAME_OFFSETS, P.TOP3_TIME_OFFSETS)

FIELD_LAYOUTS = {"championship": CHAMPIONSHIP, "top3": TOP3}


@dataclass(frozen=True)
class TableSpec:
    base: int
    stride: int
    count: int
    layout: FieldLayout
    label: str = ""

    @property
    def first_offset(self) -> int:
        """Lowest byte index any record of this table touches."""
        return min(self.base, self.base + (self.count - 1) * self.stride) + self.layout.min_offset

    @property
    def last_offset(self) -> int:
        """Highest byte index any record of this table touches."""
        return max(self.base, self.base + (self.count - 1) * self.stride) + self.layout.max_offset


@dataclass(frozen=True)
class SaveLayout:
    chunk: Range
    mirror_offset: int
    landmarks: tuple[Landmark, ...]
    championship: TableSpec
    track_top3: dict[str, TableSpec] = field(default_factory=dict)
    practice_top8: dict[str, TableSpec] = field(default_factory=dict)
    championship_sectors: dict[str, int] = field(default_factory=dict)
    practice_sectors: dict[str, int] = field(default_factory=dict)
    track_order: tuple[str, ...] = P.TRACK_ORDER


def _track_tables(bases: dict[str, int], count: int, layout: FieldLayout, kind: str) -> dict[str, TableSpec]:
    return {
        trk: TableSpec(base, P.RECORD_STRIDE, count, layout, f"{kind} {trk}")
        for trk, base in sorted(bases.items())
    }


DEFAULT_LAYOUT = SaveLayout(
    chunk=Range(P.MAIN_CHUNK_START, P.MAIN_CHUNK_END),
    mirror_offset=P.MIRROR_OFFSET,
    landmarks=tuple(Landmark(off, label) for off, label in P.LANDMARKS),
    championship=TableSpec(
        P.CHAMPIONSHIP_BASE, P.RECORD_STRIDE, P.CHAMPIONSHIP_COUNT, CHAMPIONSHIP, "championship"
    ),
    track_top3=_track_tables(P.TOP3_BASES, P.TOP3_COUNT, TOP3, "top3"),
    practice_top8=_track_tables(P.PRACTICE_BASES, P.PRACTICE_COUNT, CHAMPIONSHIP, "practice"),
    championship_sectors=dict(sorted(P.CHAMPIONSHIP_SECTOR_BASES.items())),
    practice_sectors=dict(sorted(P.PRACTICE_SECTOR_BASES.items())),
)


# ---------------------------------------------------------------------------
# JSON overlay
# ---------------------------------------------------------------------------

def _offset(value) -> int:
    if isinstance(value, bool):
        raise LayoutError(f"offset must be int or hex string, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            raise LayoutError(f"bad offset {value!r}") from None
    raise LayoutError(f"offset must be int or hex string, got {value!r}")


def _field_layout(value) -> FieldLayout:
    if isinstance(value, str):
        try:
            return FIELD_LAYOUTS[value]
        except KeyError:
            raise LayoutError(f"unknown field layout {value!r}") from None
    if isinstance(value, dict):
        try:
            name = tuple(_offset(v) for v in value["name"])
            time = tuple(_offset(v) for v in value["time"])
        except (KeyError, TypeError) as e:
            raise LayoutError(f"field layout needs 'name' and 'time': {e}") from None
        if len(name) != 3 or len(time) != 3:
            raise LayoutError("field layout needs exactly 3 name and 3 time offsets")
        if min(name + time) < 0:
            raise LayoutError(f"field layout offsets must be >= 0, got name={name} time={time}")
        return FieldLayout(name, time)
    raise LayoutError(f"bad field layout {value!r}")


def _table(obj: dict, default: TableSpec | None, label: str) -> TableSpec:
    if not isinstance(obj, dict):
        raise LayoutError(f"table {label!r} must be an object")
    if default is None and "base" not in obj:
        raise LayoutError(f"table {label!r} needs a base offset")
    base = _offset(obj["base"]) if "base" in obj else default.base
    stride = _offset(obj.get("stride", default.stride if default else P.RECORD_STRIDE))
    count = _offset(obj.get("count", default.count if default else 1))
    if "layout" in obj:
        fl = _field_layout(obj["layout"])
    elif default is not None:
        fl = default.layout
    else:
        fl = CHAMPIONSHIP
    if stride <= 0 or count < 0:
        raise LayoutError(f"table {label!r} needs stride > 0 and count >= 0")
    return TableSpec(base, stride, count, fl, label)


def _track_map(obj: dict, defaults: dict[str, TableSpec], kind: str) -> dict[str, TableSpec]:
    if not isinstance(obj, dict):
        raise LayoutError(f"{kind} tables must be an object keyed by track")
    out = dict(defaults)
    for trk, spec in obj.items():
        out[trk] = _table(spec, defaults.get(trk), f"{kind} {trk}")
    return dict(sorted(out.items()))


def _section(obj: dict, key: str) -> dict:
    value = obj.get(key, {})
    if not isinstance(value, dict):
        raise LayoutError(f"{key!r} must be an object, got {type(value).__name__}")
    return value


def layout_from_dict(obj: dict, base: SaveLayout = DEFAULT_LAYOUT) -> SaveLayout:
    """Overlay a parsed layout document on `base`. Missing keys keep their defaults."""
    if not isinstance(obj, dict):
        raise LayoutError("layout document must be an object")
    changes: dict = {}

    if "chunk" in obj:
        try:
            start, end = (_offset(v) for v in obj["chunk"])
            changes["chunk"] = Range(start, end)
        except (TypeError, ValueError) as e:
            raise LayoutError(f"chunk must be [start, end]: {e}") from None
    if "mirror_offset" in obj:
        changes["mirror_offset"] = _offset(obj["mirror_offset"])
    if "landmarks" in obj:
        try:
            changes["landmarks"] = tuple(
                Landmark(_offset(lm["offset"]), str(lm["label"])) for lm in obj["landmarks"]
            )
        except (KeyError, TypeError) as e:
            raise LayoutError(f"landmarks need offset and label: {e}") from None

    tables = _section(obj, "tables")
    if "championship" in tables:
        changes["championship"] = _table(tables["championship"], base.championship, "championship")
    if "track_top3" in tables:
        changes["track_top3"] = _track_map(tables["track_top3"], base.track_top3, "top3")
    if "practice_top8" in tables:
        changes["practice_top8"] = _track_map(tables["practice_top8"], base.practice_top8, "practice")

    sectors = _section(obj, "sectors")
    if "championship" in sectors:
        changes["championship_sectors"] = {k: _offset(v) for k, v in sorted(_section(sectors, "championship").items())}
    if "practice" in sectors:
        changes["practice_sectors"] = {k: _offset(v) for k, v in sorted(_section(sectors, "practice").items())}

    if "track_order" in obj:
        order = obj["track_order"]
        if not isinstance(order, list) or not all(isinstance(t, str) for t in order):
            raise LayoutError(f"track_order must be a list of track names, got {order!r}")
        changes["track_order"] = tuple(order)

    return replace(base, **changes)


def load_layout(path: Path | None) -> SaveLayout:
    """Load a layout JSON file; None returns the built-in layout."""
    if path is None:
        return DEFAULT_LAYOUT
    try:
        obj = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise LayoutError(str(e)) from None
    return layout_from_dict(obj)

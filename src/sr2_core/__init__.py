"""SR2 Core - Shared layout constants, time codec and errors."""
from .errors import DecodeError, FormatError, LayoutError, OutOfRange
from .layout import DEFAULT_LAYOUT, FieldLayout, Landmark, Range, SaveLayout, TableSpec, load_layout
from .timecodec import TimeValue, cs_to_time, parse_time, ticks_of, time_bytes, time_string

__all__ = [
    "DecodeError",
    "FormatError",
    "LayoutError",
    "OutOfRange",
    "DEFAULT_LAYOUT",
    "FieldLayout",
    "Landmark",
    "Range",
    "SaveLayout",
    "TableSpec",
    "load_layout",
    "TimeValue",
    "cs_to_time",
    "parse_time",
    "ticks_of",
    "time_bytes",
    "time_string",
]

"""Time codec: 24-bit little-endian tick counts to and from MM:SS.cc."""
from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import FormatError
from .protocol import TICKS_PER_CS

_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2})\.([0-9]{2})")


def ticks_of(lsb: int, mid: int, msb: int) -> int:
    """Compose a 24-bit little-endian integer from bytes (lsb, mid, msb)."""
    return (lsb & 0xFF) | ((mid & 0xFF) << 8) | ((msb & 0xFF) << 16)


def cs_to_time(cs: int) -> str:
    """Format centiseconds as MM:SS.cc."""
    minutes, rem = divmod(cs, 6000)
    seconds, hundredths = divmod(rem, 100)
    return f"{minutes:02d}:{seconds:02d}.{hundredths:02d}"


def time_string(ticks: int) -> str:
    """Format a raw tick count; the sub-centisecond remainder is dropped."""
    return cs_to_time(ticks // TICKS_PER_CS)


def parse_time(text: str) -> int:
    """Parse MM:SS.cc into centiseconds."""
    if not isinstance(text, str):
        raise FormatError(repr(text))
    m = _TIME_RE.fullmatch(text)
    if m is None:
        raise FormatError(repr(text))
    mm, ss, cc = (int(g) for g in m.groups())
    return mm * 6000 + ss * 100 + cc


def time_bytes(cs: int) -> tuple[int, int, int]:
    """Encode centiseconds as (lsb, mid, msb) tick bytes."""
    ticks = cs * TICKS_PER_CS
    if not 0 <= ticks <= 0xFFFFFF:
        raise ValueError(f"{cs} cs does not fit in 24-bit ticks")
    return ticks & 0xFF, (ticks >> 8) & 0xFF, (ticks >> 16) & 0xFF


@dataclass(frozen=True)
class TimeValue:
    ticks: int

    @classmethod
    def from_bytes(cls, lsb: int, mid: int, msb: int) -> TimeValue:
        return cls(ticks_of(lsb, mid, msb))

    @property
    def centiseconds(self) -> int:
        return self.ticks // TICKS_PER_CS

    @property
    def text(self) -> str:
        return cs_to_time(self.centiseconds)

    def __str__(self) -> str:
        return self.text

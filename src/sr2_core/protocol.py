"""Sega Rally 2 NVRAM layout constants.

Single source of truth for chunk bounds, record layouts and table bases.
Keep this file stable. Extractors and explorers must remain synchronized.
"""

# Authoritative chunk bounds. A byte-identical copy lives at +MIRROR_OFFSET.
MAIN_CHUNK_START = 0x0147
MAIN_CHUNK_END = 0x38C0
MIRROR_OFFSET = 0x10000

# 60 ticks = 1 centisecond
TICKS_PER_CS = 60
TIME_WINDOW_LEN = 6

# 32-byte records: name bytes, then time bytes as (lsb, mid, msb)
RECORD_STRIDE = 0x20
CHAMPIONSHIP_NAME_OFFSETS = (1, 0, 5)
CHAMPIONSHIP_TIME_OFFSETS = (20, 21, 16)
TOP3_NAME_OFFSETS = (11, 10, 15)
TOP3_TIME_OFFSETS = (30, 31, 26)

# Championship top-16
CHAMPIONSHIP_BASE = 0x0267
CHAMPIONSHIP_COUNT = 16

# Per-track top-3 (championship mode)
TOP3_COUNT = 3
TOP3_BASES = {
    "mountain": 0x0E5D,
    "desert": 0x0F5D,
    "riviera": 0x105D,
    "snowy": 0x115D,
}

# Per-track practice top-8
PRACTICE_COUNT = 8
PRACTICE_BASES = {
    "mountain": 0x1467,
    "desert": 0x1567,
    "riviera": 0x1667,
    "snowy": 0x1767,
}

# Sector tables: [msb | 0 0 0 | lsb | mid | ? | 0], terminated by 32 zero bytes
SECTOR_STRIDE = 8
SECTOR_TERMINATOR_LEN = 32
CHAMPIONSHIP_SECTOR_BASES = {
    "desert": 0x21AF,
    "mountain": 0x1F2F,
    "snowy": 0x26AF,
    "riviera": 0x242F,
}
PRACTICE_SECTOR_BASES = {
    "desert": 0x30AF,
    "mountain": 0x2E37,
    "snowy": 0x35B7,
    "riviera": 0x3337,
}

# Championship running order
TRACK_ORDER = ("desert", "mountain", "snowy", "riviera")

LANDMARKS = (
    (0x0267, "Championship (primary)"),
    (0x0E5D, "Top-3 Mountain"),
    (0x0F5D, "Top-3 Desert"),
    (0x105D, "Top-3 Riviera"),
    (0x115D, "Top-3 Snowy"),
)

# Scanning defaults
BLANK_BYTE = 0x00
DEFAULT_MIN_BLANK_LEN = 1
DEFAULT_CHOP_LEN = 32
DEFAULT_ROW_WIDTH = 32

# Plausible lap/stage times for the pattern detector (3 s to 10 min)
PLAUSIBLE_MIN_CS = 300
PLAUSIBLE_MAX_CS = 60000

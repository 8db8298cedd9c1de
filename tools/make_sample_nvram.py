"""Generate a synthetic Sega Rally 2 NVRAM image with known leaderboard contents.

Usage:
    python tools/make_sample_nvram.py OUT_FILE [--bad-mirror]
"""
from pathlib import Path

from sr2_core.layout import DEFAULT_LAYOUT, SaveLayout, TableSpec
from sr2_core.protocol import SECTOR_STRIDE
from sr2_core.timecodec import parse_time, time_bytes

IMAGE_SIZE = 0x20000

CHAMPIONSHIP = [
    ("PEZ", "04:09.54"), ("PEZ", "04:10.20"), ("XYZ", "04:10.32"), ("PEZ", "04:10.49"),
    ("PEZ", "04:10.56"), ("VGO", "04:12.08"), ("XYZ", "04:13.71"), ("SAS", "04:15.00"),
    ("VGO", "04:16.42"), ("PEZ", "04:17.93"), ("SAS", "04:20.11"), ("XYZ", "04:22.65"),
    ("VGG", "04:25.30"), ("SAS", "04:28.88"), ("VGO", "04:31.07"), ("AAA", "05:00.00"),
]

TOP3 = {
    "desert": [("PEZ", "00:57.03"), ("PEZ", "00:57.23"), ("XYZ", "00:57.27")],
    "mountain": [("PEZ", "01:02.96"), ("XYZ", "01:03.07"), ("PEZ", "01:03.15")],
    "snowy": [("PEZ", "00:59.74"), ("PEZ", "01:00.08"), ("VGO", "01:00.44")],
    "riviera": [("PEZ", "01:06.61"), ("SAS", "01:07.17"), ("PEZ", "01:07.18")],
}

PRACTICE = {
    "desert": [("XYZ", "02:44.52"), ("PEZ", "02:46.83")],
    "mountain": [("PEZ", "03:08.02"), ("XYZ", "03:09.54")],
    "snowy": [("XYZ", "02:55.68"), ("PEZ", "02:57.64")],
    "riviera": [("PEZ", "02:47.43"), ("PEZ", "02:53.66"), ("VGO", "02:59.13")],
}
PRACTICE_FILLER = ("SAS", "10:00.00")

CHAMPIONSHIP_SECTORS = {
    "desert": ["00:11.42", "00:17.76", "00:25.87", "00:31.84", "00:39.84", "00:43.44", "00:50.25", "00:57.03"],
    "mountain": ["01:07.11", "01:14.39", "01:21.43", "01:26.84", "01:37.44", "01:44.95", "01:53.43", "02:00.96"],
    "riviera": ["03:07.42", "03:11.29", "03:16.32", "03:20.12", "03:23.67", "03:27.50", "03:32.87", "03:36.84",
                "03:43.92", "03:49.21", "03:53.10", "03:56.76", "04:00.82", "04:05.70", "04:09.54"],
    "snowy": ["02:10.17", "02:17.28", "02:24.00", "02:30.73", "02:38.35", "02:47.47", "02:54.51", "03:01.40"],
}

PRACTICE_SECTORS = {
    "desert": ["00:20.10", "00:41.33", "01:02.80"],
    "mountain": ["00:22.45", "00:47.90"],
    "snowy": ["00:19.99", "00:40.01", "01:01.23"],
    "riviera": ["00:18.50", "00:36.75"],
}


def _put_record(img: bytearray, spec: TableSpec, k: int, name: str, time: str) -> None:
    off = spec.base + k * spec.stride
    for pos, ch in zip(spec.layout.name, name):
        img[off + pos] = ord(ch)
    for pos, b in zip(spec.layout.time, time_bytes(parse_time(time))):
        img[off + pos] = b


def _put_sectors(img: bytearray, base: int, times: list[str]) -> None:
    for k, t in enumerate(times):
        lsb, mid, msb = time_bytes(parse_time(t))
        off = base + k * SECTOR_STRIDE
        img[off] = msb
        img[off + 4] = lsb
        img[off + 5] = mid


def build_sample_image(layout: SaveLayout = DEFAULT_LAYOUT, mirror: bool = True) -> bytes:
    img = bytearray(IMAGE_SIZE)

    for k, (name, time) in enumerate(CHAMPIONSHIP):
        _put_record(img, layout.championship, k, name, time)
    for trk, rows in TOP3.items():
        for k, (name, time) in enumerate(rows):
            _put_record(img, layout.track_top3[trk], k, name, time)
    for trk, rows in PRACTICE.items():
        spec = layout.practice_top8[trk]
        padded = rows + [PRACTICE_FILLER] * (spec.count - len(rows))
        for k, (name, time) in enumerate(padded):
            _put_record(img, spec, k, name, time)
    for trk, times in CHAMPIONSHIP_SECTORS.items():
        _put_sectors(img, layout.championship_sectors[trk], times)
    for trk, times in PRACTICE_SECTORS.items():
        _put_sectors(img, layout.practice_sectors[trk], times)

    lo, hi = layout.chunk.start, layout.chunk.end
    img[lo + layout.mirror_offset:hi + layout.mirror_offset] = img[lo:hi]
    if not mirror:
        img[lo + layout.mirror_offset] ^= 0xFF
    return bytes(img)


if __name__ == "__main__":
    import sys

    args = [a for a in sys.argv[1:] if a]
    bad_mirror = "--bad-mirror" in args
    args = [a for a in args if a != "--bad-mirror"]
    if not args:
        raise SystemExit("Usage: make_sample_nvram.py OUT_FILE [--bad-mirror]")

    out = Path(args[0])
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(build_sample_image(mirror=not bad_mirror))
    print(f"GENERATED: {out}")

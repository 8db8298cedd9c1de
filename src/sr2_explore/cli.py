"""SR2 Explore - Inspect unmapped NVRAM regions."""
from __future__ import annotations

from pathlib import Path

import click

from sr2_core.errors import DecodeError
from sr2_core.layout import load_layout
from sr2_core.protocol import BLANK_BYTE, DEFAULT_CHOP_LEN, DEFAULT_MIN_BLANK_LEN, DEFAULT_ROW_WIDTH
from sr2_extract.image import read_nvram_bytes

from .hexdump import hex_dump
from .intervals import coverage
from .patterns import DEFAULT_BAND, Band, detect, scan_rows
from .regions import landmark_regions, region_summary


class HexInt(click.ParamType):
    """Accepts 0x-prefixed, 0o, 0b or decimal integers."""

    name = "offset"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return int(value, 0)
        except ValueError:
            self.fail(f"{value!r} is not an integer offset", param, ctx)


HEX = HexInt()
NVRAM = click.argument("nvram", type=click.Path(exists=True, dir_okay=False, path_type=Path))


def _fatal(e: Exception) -> None:
    click.echo(f"FATAL: {e}")
    raise SystemExit(1)


def _load(ctx: click.Context, nvram: Path) -> bytes:
    try:
        return read_nvram_bytes(nvram, ctx.obj)
    except (DecodeError, OSError) as e:
        _fatal(e)


def _window(ctx: click.Context, start: int | None, end: int | None) -> tuple[int, int]:
    """Default to the main chunk; never let a window reach into the mirror copy."""
    chunk = ctx.obj.chunk
    start = chunk.start if start is None else start
    end = chunk.end if end is None else end
    if start < chunk.start or end > chunk.end:
        click.echo(f"note: clamping [{start:#06x}, {end:#06x}) to main chunk {chunk}", err=True)
    return max(start, chunk.start), min(end, chunk.end)


@click.group()
@click.option("--layout", "layout_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Layout JSON overriding built-in offsets")
@click.pass_context
def main(ctx: click.Context, layout_path: Path | None) -> None:
    """Explore Sega Rally 2 NVRAM structure."""
    try:
        ctx.obj = load_layout(layout_path)
    except DecodeError as e:
        _fatal(e)


@main.command("regions")
@NVRAM
@click.option("--blank-byte", type=HEX, default=BLANK_BYTE, show_default=True)
@click.option("--min-len", type=int, default=DEFAULT_MIN_BLANK_LEN, show_default=True,
              help="Shortest blank run that separates regions")
@click.pass_context
def regions_cmd(ctx: click.Context, nvram: Path, blank_byte: int, min_len: int) -> None:
    """Non-blank regions of the main chunk, tagged with landmarks."""
    data = _load(ctx, nvram)
    for r in region_summary(data, ctx.obj.landmarks, blank_byte, min_len, ctx.obj.chunk):
        tags = f" {list(r.tags)}" if r.tags else ""
        click.echo(f"Region {r.start:04x}->{r.end:04x} (size {r.size}){tags}")


@main.command("landmarks")
@NVRAM
@click.option("--blank-byte", type=HEX, default=BLANK_BYTE, show_default=True)
@click.option("--min-len", type=int, default=DEFAULT_CHOP_LEN, show_default=True)
@click.option("--dump", is_flag=True, help="Hex dump each landmark region")
@click.pass_context
def landmarks_cmd(ctx: click.Context, nvram: Path, blank_byte: int, min_len: int, dump: bool) -> None:
    """Regions from each landmark up to the next long blank run."""
    data = _load(ctx, nvram)
    for lr in landmark_regions(data, ctx.obj.landmarks, blank_byte, min_len, ctx.obj.chunk.end):
        click.echo(f"{lr.label}: {lr.start:04x}->{lr.end:04x} (size {lr.size})")
        if dump:
            for line in hex_dump(data, lr.start, lr.end):
                click.echo(line)


def _band_options(f):
    f = click.option("--max-cs", type=int, default=DEFAULT_BAND.max_cs, show_default=True)(f)
    f = click.option("--min-cs", type=int, default=DEFAULT_BAND.min_cs, show_default=True)(f)
    f = click.option("--row-width", type=click.IntRange(min=1), default=DEFAULT_ROW_WIDTH, show_default=True)(f)
    return f


@main.command("dump")
@NVRAM
@click.argument("start", type=HEX)
@click.argument("end", type=HEX)
@click.option("--times", is_flag=True, help="Annotate rows with candidate time windows")
@_band_options
@click.pass_context
def dump_cmd(ctx, nvram, start, end, times, row_width, min_cs, max_cs) -> None:
    """Hex dump [START, END) of the main chunk."""
    data = _load(ctx, nvram)
    start, end = _window(ctx, start, end)
    overlays = scan_rows(data, start, end, row_width, Band(min_cs, max_cs)) if times else None
    for line in hex_dump(data, start, end, row_width, overlays):
        click.echo(line)


@main.command("scan")
@NVRAM
@click.argument("start", type=HEX, required=False)
@click.argument("end", type=HEX, required=False)
@_band_options
@click.pass_context
def scan_cmd(ctx, nvram, start, end, row_width, min_cs, max_cs) -> None:
    """List candidate time windows in [START, END) (default: whole main chunk)."""
    data = _load(ctx, nvram)
    start, end = _window(ctx, start, end)
    found = detect(data, start, end, row_width, Band(min_cs, max_cs))
    for c in found:
        click.echo(f"{c.start:04X}  {c.time}  {c.kind:<9} score={c.score}")
    click.echo(f"{len(found)} candidates, {coverage(found)} bytes in [{start:#06x}, {end:#06x})")


if __name__ == "__main__":
    main()

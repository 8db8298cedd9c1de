"""SR2 Extract - Print settled NVRAM tables."""
from __future__ import annotations

import json
from pathlib import Path

import click

from sr2_core.errors import ERRORS, DecodeError
from sr2_core.layout import load_layout

from .frames import entries_frame, frame_text, sectors_frame, tracks_frame
from .image import read_nvram_bytes
from .players import (
    compare_top3,
    player_best_championship,
    player_best_per_track,
    potential_time,
    signed_diff,
)
from .tables import (
    championship_leaderboard,
    championship_sectors,
    practice_sectors,
    practice_top8,
    track_top3,
)

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

NVRAM = click.argument("nvram", type=click.Path(exists=True, dir_okay=False, path_type=Path))


class _Ctx:
    def __init__(self, layout_path: Path | None):
        self.layout = load_layout(layout_path)

    def load(self, path: Path) -> bytes:
        return read_nvram_bytes(path, self.layout)


def _fatal(e: Exception) -> None:
    # Fail closed with a single-line reason, no stack trace.
    click.echo(f"FATAL: {e}")
    raise SystemExit(1)


@click.group()
@click.option("--layout", "layout_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Layout JSON overriding built-in offsets")
@click.pass_context
def main(ctx: click.Context, layout_path: Path | None) -> None:
    """Decode Sega Rally 2 NVRAM leaderboards."""
    try:
        ctx.obj = _Ctx(layout_path)
    except DecodeError as e:
        _fatal(e)


@main.command("leaderboard")
@NVRAM
@click.option("--json", "as_json", is_flag=True, help="Emit canonical JSON instead of a table")
@click.pass_obj
def leaderboard_cmd(obj: _Ctx, nvram: Path, as_json: bool) -> None:
    """Championship top-16."""
    try:
        entries = championship_leaderboard(obj.load(nvram), obj.layout)
    except (DecodeError, OSError) as e:
        _fatal(e)
    if as_json:
        click.echo(json.dumps([e.as_dict() for e in entries], **CANONICAL_JSON_KW))
        return
    click.echo("CHAMPIONSHIP LEADERBOARD")
    click.echo("========================")
    click.echo(frame_text(entries_frame(entries, "championship")))


@main.command("top3")
@NVRAM
@click.option("--initials", is_flag=True, help="Show initials next to each time")
@click.pass_obj
def top3_cmd(obj: _Ctx, nvram: Path, initials: bool) -> None:
    """Per-track championship top-3."""
    try:
        by_track = track_top3(obj.load(nvram), obj.layout)
    except (DecodeError, OSError) as e:
        _fatal(e)
    click.echo("TRACK TOP-3 TIMES")
    click.echo("=================")
    for trk, entries in sorted(by_track.items()):
        cells = [f"{e.time} ({e.name})" if initials else e.time for e in entries]
        click.echo(f"{trk:>9}: {', '.join(cells)}")


@main.command("practice")
@NVRAM
@click.pass_obj
def practice_cmd(obj: _Ctx, nvram: Path) -> None:
    """Per-track practice top-8."""
    try:
        by_track = practice_top8(obj.load(nvram), obj.layout)
    except (DecodeError, OSError) as e:
        _fatal(e)
    click.echo("PRACTICE TOP-8")
    click.echo("==============")
    df = tracks_frame(by_track, obj.layout.track_order)
    click.echo(frame_text(df[["table", "offset", "name", "time"]]))


@main.command("sectors")
@NVRAM
@click.option("--practice", is_flag=True, help="Practice sector tables instead of championship")
@click.option("--splits", is_flag=True, help="Per-sector durations instead of cumulative times")
@click.option("--track", default=None, help="Only this track")
@click.pass_obj
def sectors_cmd(obj: _Ctx, nvram: Path, practice: bool, splits: bool, track: str | None) -> None:
    """Best sector times per track."""
    try:
        data = obj.load(nvram)
        by_track = practice_sectors(data, obj.layout) if practice else championship_sectors(data, obj.layout)
    except (DecodeError, OSError) as e:
        _fatal(e)
    if track is not None:
        key = track.lower()
        if key not in by_track:
            _fatal(ValueError(f"unknown track {track!r}"))
        by_track = {key: by_track[key]}
    title = "PRACTICE SECTORS" if practice else "CHAMPIONSHIP SECTORS"
    click.echo(title + (" (splits)" if splits else ""))
    click.echo("=" * len(title))
    click.echo(frame_text(sectors_frame(by_track, obj.layout.track_order, splits)))


@main.command("player")
@NVRAM
@click.argument("initials")
@click.pass_obj
def player_cmd(obj: _Ctx, nvram: Path, initials: str) -> None:
    """Best per track and potential time for a player."""
    try:
        data = obj.load(nvram)
        best = player_best_per_track(track_top3(data, obj.layout), initials)
        champ = player_best_championship(championship_leaderboard(data, obj.layout), initials)
    except (DecodeError, OSError) as e:
        _fatal(e)

    click.echo(f"Best per track for {initials}:")
    click.echo("==============================")
    for trk in obj.layout.track_order:
        e = best.get(trk)
        click.echo(f"{trk:>9}: {e.time} ({e.name})" if e else f"{trk:>9}: -")
    click.echo("------------------------------")
    if len(best) < len(obj.layout.track_order):
        click.echo(f"Incomplete: {len(best)}/{len(obj.layout.track_order)} tracks")
        return
    pot_cs, pot = potential_time(best)
    click.echo(f"Potential: {pot}")
    click.echo(f"Championship best: {champ.time if champ else '-'}")
    if champ:
        click.echo(f"Diff (potential - best): {signed_diff(pot_cs, champ.centiseconds)}")


@main.command("compare")
@NVRAM
@click.argument("expected", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def compare_cmd(obj: _Ctx, nvram: Path, expected: Path) -> None:
    """Check per-track top-3 times against an expected JSON map {track: [MM:SS.cc, ...]}."""
    try:
        exp = json.loads(expected.read_text(encoding="utf-8"))
        if not isinstance(exp, dict):
            raise ValueError("expected JSON must map track -> [MM:SS.cc, ...]")
        diffs = compare_top3(track_top3(obj.load(nvram), obj.layout), exp)
    except (ValueError, OSError) as e:
        _fatal(e)
    errors = [
        {"code": "E_TOP3_MISMATCH", "message": ERRORS["E_TOP3_MISMATCH"], "track": trk, **d}
        for trk, d in diffs.items()
    ]
    result = {"status": "FAIL" if errors else "PASS", "error_count": len(errors), "errors": errors}
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))


if __name__ == "__main__":
    main()

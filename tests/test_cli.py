import json
import re
import subprocess
import sys
from pathlib import Path

REPO = Path(__file__).resolve().parents[1]


def run(args, cwd=REPO):
    return subprocess.run([sys.executable, *args], cwd=cwd, check=False, capture_output=True, text=True)


def test_sample_tool_and_leaderboard_json(tmp_path):
    image = tmp_path / "sample.nv"
    r = run(["tools/make_sample_nvram.py", str(image)])
    assert r.returncode == 0, r.stderr + r.stdout
    assert image.stat().st_size == 0x20000

    r = run(["-m", "sr2_extract.cli", "leaderboard", str(image), "--json"])
    assert r.returncode == 0, r.stderr + r.stdout
    rows = json.loads(r.stdout)
    assert len(rows) == 16
    assert rows[0]["name"] == "PEZ" and rows[0]["time"] == "04:09.54"
    assert all(re.fullmatch(r"\d\d:\d\d\.\d\d", row["time"]) for row in rows)


def test_extract_reports(sample_path):
    r = run(["-m", "sr2_extract.cli", "top3", str(sample_path), "--initials"])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "mountain: 01:02.96 (PEZ), 01:03.07 (XYZ), 01:03.15 (PEZ)" in r.stdout

    r = run(["-m", "sr2_extract.cli", "player", str(sample_path), "PEZ"])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "Potential: 04:06.34" in r.stdout
    assert "Diff (potential - best): -00:03.20" in r.stdout

    r = run(["-m", "sr2_extract.cli", "sectors", str(sample_path), "--track", "Desert", "--splits"])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "00:06.34" in r.stdout

    r = run(["-m", "sr2_extract.cli", "practice", str(sample_path)])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "03:08.02" in r.stdout


def test_compare_pass_and_fail(sample_path, tmp_path):
    good = tmp_path / "good.json"
    good.write_text(json.dumps({"riviera": ["01:06.61", "01:07.17", "01:07.18"]}), encoding="utf-8")
    r = run(["-m", "sr2_extract.cli", "compare", str(sample_path), str(good)])
    assert json.loads(r.stdout) == {"status": "PASS", "error_count": 0, "errors": []}

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"riviera": ["01:06.62", "01:07.17", "01:07.18"]}), encoding="utf-8")
    r = run(["-m", "sr2_extract.cli", "compare", str(sample_path), str(bad)])
    result = json.loads(r.stdout)
    assert result["status"] == "FAIL"
    assert result["errors"][0]["code"] == "E_TOP3_MISMATCH"
    assert result["errors"][0]["track"] == "riviera"


def test_wrong_layout_fails_closed(sample_path, tmp_path):
    layout = tmp_path / "layout.json"
    layout.write_text(json.dumps({"tables": {"championship": {"base": "0x38B0"}}}), encoding="utf-8")
    r = run(["-m", "sr2_extract.cli", "--layout", str(layout), "leaderboard", str(sample_path)])
    assert r.returncode == 1
    assert r.stdout.startswith("FATAL: Byte access outside buffer bounds")


def test_explore_commands(sample_path):
    r = run(["-m", "sr2_explore.cli", "regions", str(sample_path), "--min-len", "32"])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "Region 0267->045d (size 502) ['Championship (primary)']" in r.stdout

    r = run(["-m", "sr2_explore.cli", "landmarks", str(sample_path)])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "Top-3 Mountain: 0e5d->0ebd (size 96)" in r.stdout

    r = run(["-m", "sr2_explore.cli", "scan", str(sample_path), "0x1F2F", "0x1F4F"])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "1F2F  01:07.11  record    score=2" in r.stdout
    assert "4 candidates, 24 bytes" in r.stdout

    r = run(["-m", "sr2_explore.cli", "dump", str(sample_path), "0x1F2F", "0x1F4F", "--times"])
    assert r.returncode == 0, r.stderr + r.stdout
    lines = r.stdout.splitlines()
    assert lines[0].startswith("1F2F: 06 00 00 00 E4 24")
    assert "^ 1F2F+6 01:07.11 [record score=2]" in lines[1]


def test_compare_rejects_non_list_expectation(sample_path, tmp_path):
    exp = tmp_path / "exp.json"
    exp.write_text(json.dumps({"desert": 5}), encoding="utf-8")
    r = run(["-m", "sr2_extract.cli", "compare", str(sample_path), str(exp)])
    assert r.returncode == 1
    assert r.stdout.startswith("FATAL: Time string is not MM:SS.cc")
    assert "Traceback" not in r.stderr


def test_bad_layout_shape_fails_closed(sample_path, tmp_path):
    layout = tmp_path / "layout.json"
    layout.write_text(json.dumps({"sectors": {"championship": [256]}}), encoding="utf-8")
    r = run(["-m", "sr2_extract.cli", "--layout", str(layout), "sectors", str(sample_path)])
    assert r.returncode == 1
    assert r.stdout.startswith("FATAL: Layout JSON invalid")
    assert "Traceback" not in r.stderr


def test_dump_rejects_zero_row_width(sample_path):
    r = run(["-m", "sr2_explore.cli", "dump", str(sample_path), "0x1F2F", "0x1F4F", "--row-width", "0"])
    assert r.returncode == 2
    assert "--row-width" in r.stderr
    assert "Traceback" not in r.stderr

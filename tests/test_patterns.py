from dataclasses import dataclass

from sr2_core.layout import DEFAULT_LAYOUT
from sr2_core.timecodec import time_bytes
from sr2_explore.intervals import overlaps, select_greedy
from sr2_explore.patterns import (
    DUPLICATE,
    RECORD,
    Band,
    Candidate,
    detect,
    duplicate_at,
    record_at,
    row_candidates,
    scan_rows,
)

LSB, MID, MSB = time_bytes(6203)  # 01:02.03


def _filled(n: int, fill: int = 0xFF) -> bytearray:
    return bytearray([fill] * n)


def test_duplicate_triplet_at_offset_10():
    buf = bytearray(64)
    buf[10:16] = bytes([LSB, MID, MSB, LSB, MID, MSB])
    found = [c for c in row_candidates(bytes(buf), 0, 32) if c.kind == DUPLICATE]
    assert [c.start for c in found] == [10]
    assert found[0].digits == "010203"
    assert found[0].score == 1


def test_duplicate_selected_when_alone():
    buf = _filled(64)
    buf[10:16] = bytes([LSB, MID, MSB, LSB, MID, MSB])
    [cand] = detect(bytes(buf), 0, 64)
    assert (cand.start, cand.kind, cand.time) == (10, DUPLICATE, "01:02.03")


def test_record_layout_heuristic():
    buf = _filled(32)
    buf[4:10] = bytes([MSB, 0, 0, 0, LSB, MID])
    cand = record_at(bytes(buf), 4)
    assert cand is not None
    assert (cand.kind, cand.score, cand.time) == (RECORD, 2, "01:02.03")
    buf[6] = 1
    assert record_at(bytes(buf), 4) is None


def test_implausible_values_do_not_fire():
    zeros = bytes(6)
    assert duplicate_at(zeros, 0) is None
    assert record_at(zeros, 0) is None
    assert duplicate_at(bytes([0xFF] * 6), 0) is None
    narrow = Band(min_cs=7000, max_cs=8000)
    assert duplicate_at(bytes([LSB, MID, MSB] * 2), 0, narrow) is None


def test_record_preferred_over_overlapping_duplicate():
    buf = _filled(32)
    buf[10:16] = bytes([MSB, 0, 0, 0, LSB, MID])
    buf[16:20] = bytes([MSB, LSB, MID, MSB])
    row = row_candidates(bytes(buf), 0, 32)
    assert {(c.start, c.kind) for c in row} == {(10, RECORD), (14, DUPLICATE)}
    [overlay] = scan_rows(bytes(buf), 0, 32)
    assert [(c.start, c.kind) for c in overlay.candidates] == [(10, RECORD)]


def test_equal_scores_prefer_higher_start():
    @dataclass(frozen=True)
    class S:
        start: int
        length: int
        score: int

    picked = select_greedy([S(0, 6, 1), S(4, 6, 1), S(8, 6, 1)])
    # greedy by start desc keeps 8 and then 0; 4 overlaps both
    assert picked == [S(0, 6, 1), S(8, 6, 1)]
    assert select_greedy([S(0, 6, 1), S(3, 6, 2)]) == [S(3, 6, 2)]


def test_selected_candidates_never_overlap(sample_image):
    chunk = DEFAULT_LAYOUT.chunk
    for row in scan_rows(sample_image, chunk.start, chunk.end):
        cands = list(row.candidates)
        for i, a in enumerate(cands):
            assert row.start <= a.start and a.end <= row.end
            for b in cands[i + 1:]:
                assert not overlaps(a, b)


def test_windows_do_not_straddle_rows_or_range_end():
    buf = _filled(40)
    buf[28:34] = bytes([LSB, MID, MSB, LSB, MID, MSB])
    assert detect(bytes(buf), 0, 40) == []
    assert [c.start for c in detect(bytes(buf), 28, 40)] == [28]
    assert detect(bytes(buf), 28, 33) == []


def test_empty_and_inverted_ranges():
    buf = bytes(64)
    assert scan_rows(buf, 10, 10) == []
    assert scan_rows(buf, 20, 10) == []
    assert detect(buf, -5, 3) == []
    assert detect(buf, 0, 64, row_width=0) == []
    assert detect(b"", 0, 100) == []


def test_sector_table_surfaces_as_record_candidates(sample_image):
    base = DEFAULT_LAYOUT.championship_sectors["mountain"]
    first_row = scan_rows(sample_image, base, base + 0x40)[0]
    assert [(c.start - base, c.kind, c.time) for c in first_row.candidates] == [
        (0, RECORD, "01:07.11"),
        (8, RECORD, "01:14.39"),
        (16, RECORD, "01:21.43"),
        (24, RECORD, "01:26.84"),
    ]


def test_candidate_properties():
    c = Candidate(start=0x100, centiseconds=6203, kind=DUPLICATE, score=1)
    assert c.end == 0x106
    assert c.time == "01:02.03"
    assert c.digits == "010203"

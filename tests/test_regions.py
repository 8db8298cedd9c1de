import random

import pytest

from sr2_core.errors import OutOfRange
from sr2_core.layout import DEFAULT_LAYOUT, Landmark, Range
from sr2_explore.regions import (
    blank_ranges,
    complement,
    landmark_region,
    landmark_regions,
    next_blank_run,
    region_summary,
    tag_region,
)


def test_blank_ranges_drop_short_runs():
    buf = bytes([1, 0, 0, 1, 0, 0, 0, 0, 1, 0])
    assert blank_ranges(buf) == [Range(1, 3), Range(4, 8), Range(9, 10)]
    assert blank_ranges(buf, min_len=3) == [Range(4, 8)]


def test_blank_ranges_respect_bounds():
    buf = bytes([0, 0, 0, 0, 1, 0, 0, 0, 0, 0])
    assert blank_ranges(buf, 0, 1, Range(2, 7)) == [Range(2, 4), Range(5, 7)]


def test_complement_keeps_short_blank_runs_inside():
    buf = bytes([1, 0, 1, 0, 0, 0, 0, 1, 1])
    blanks = blank_ranges(buf, min_len=3)
    assert complement(len(buf), blanks) == [Range(0, 3), Range(7, 9)]


def test_complement_sorts_input():
    assert complement(10, [Range(6, 8), Range(1, 2)]) == [Range(0, 1), Range(2, 6), Range(8, 10)]
    assert complement(5, []) == [Range(0, 5)]


def test_blank_and_complement_partition_every_offset():
    rng = random.Random(1234)
    for _ in range(200):
        n = rng.randint(0, 80)
        buf = bytes(rng.choice([0, 0, 0, 7]) for _ in range(n))
        min_len = rng.randint(1, 5)
        blanks = blank_ranges(buf, min_len=min_len)
        rest = complement(n, blanks)
        owners = [0] * n
        for r in blanks + rest:
            for i in range(r.start, r.end):
                owners[i] += 1
        assert owners == [1] * n


def test_tag_region():
    lms = [Landmark(0x10, "a"), Landmark(0x20, "b")]
    assert tag_region(Range(0x10, 0x20), lms) == ["a"]
    assert tag_region(Range(0x00, 0x30), lms) == ["a", "b"]
    assert tag_region(Range(0x11, 0x20), lms) == []


def test_region_summary_on_sample(sample_image):
    regions = region_summary(sample_image, DEFAULT_LAYOUT.landmarks, 0, 32, DEFAULT_LAYOUT.chunk)
    first = regions[0]
    assert (first.start, first.end) == (0x267, 0x45D)
    assert first.tags == ("Championship (primary)",)
    assert all(DEFAULT_LAYOUT.chunk.start <= r.start and r.end <= DEFAULT_LAYOUT.chunk.end for r in regions)
    # top-3 records open with ten zero bytes, so their landmarks fall in blank space
    mountain = next(r for r in regions if r.start <= 0xE67 < r.end)
    assert mountain.start == 0xE5D + 10
    assert mountain.tags == ()


def test_next_blank_run():
    buf = bytes([1, 0, 0, 1, 0, 0, 0, 1])
    assert next_blank_run(buf, 0, min_len=3) == 4
    assert next_blank_run(buf, 0, min_len=2) == 1
    assert next_blank_run(buf, 5, min_len=2) == 5
    assert next_blank_run(buf, 0, min_len=4) is None
    assert next_blank_run(buf, 0, min_len=3, end=6) is None
    assert next_blank_run(buf, 99, min_len=1) is None


def test_landmark_region_stops_at_blank_run():
    buf = bytes([9] * 8 + [0] * 4 + [9] * 4)
    assert landmark_region(buf, Landmark(2, "x"), min_len=4) == Range(2, 8)
    assert landmark_region(buf, Landmark(2, "x"), min_len=5) == Range(2, 16)
    with pytest.raises(OutOfRange):
        landmark_region(buf, Landmark(16, "past"), min_len=4)


def test_landmark_regions_on_sample(sample_image):
    regions = landmark_regions(sample_image, DEFAULT_LAYOUT.landmarks, end=DEFAULT_LAYOUT.chunk.end)
    by_label = {r.label: r for r in regions}
    assert (by_label["Championship (primary)"].start, by_label["Championship (primary)"].end) == (0x267, 0x45D)
    assert by_label["Top-3 Mountain"].size == 3 * 0x20


def test_landmark_regions_skip_out_of_bound_landmarks():
    with pytest.warns(UserWarning, match="outside"):
        regions = landmark_regions(bytes(16), [Landmark(4, "in"), Landmark(40, "out")], min_len=4)
    assert [r.label for r in regions] == ["in"]

from __future__ import annotations

from clinic_calendar.lane_assign import assign_lanes, max_concurrency, overlap_lane_counts, sort_order
from clinic_calendar.model import NormalizedInterval


def _iv(start: int, end: int) -> NormalizedInterval:
    return NormalizedInterval(start=start, end=end, effective_start=start, effective_end=end, end_padded=False)


def test_sort_order_is_stable() -> None:
    intervals = [_iv(30, 40), _iv(10, 20), _iv(30, 35), _iv(10, 50)]
    assert sort_order(intervals) == [1, 3, 0, 2]


def test_assign_lanes_returns_input_order() -> None:
    intervals = [_iv(60, 90), _iv(0, 30), _iv(15, 75)]
    assert assign_lanes(intervals) == [0, 0, 1]


def test_touching_intervals_share_a_lane() -> None:
    assert assign_lanes([_iv(0, 15), _iv(15, 30), _iv(30, 45)]) == [0, 0, 0]


def test_overlap_lane_counts_include_self() -> None:
    intervals = [_iv(0, 30), _iv(10, 20), _iv(40, 50)]
    lanes = assign_lanes(intervals)
    assert overlap_lane_counts(intervals, lanes) == [2, 2, 1]


def test_max_concurrency() -> None:
    assert max_concurrency([]) == 0
    assert max_concurrency([_iv(0, 15), _iv(15, 30)]) == 1
    assert max_concurrency([_iv(0, 60), _iv(10, 20), _iv(15, 25)]) == 3

from __future__ import annotations

import random

import pytest

from clinic_calendar.interval import intervals_overlap, normalize_interval
from clinic_calendar.lane_assign import max_concurrency
from clinic_calendar.layout import compute_layout
from clinic_calendar.model import (
    Appointment,
    InvalidConfig,
    InvalidInterval,
    LayoutConfig,
    LayoutError,
    LayoutResult,
)


def _appt(event_id: str, start, end=None) -> Appointment:
    return Appointment(event_id=event_id, start=start, end=end)


def test_true_overlap_splits_width() -> None:
    layout = compute_layout([_appt("a", "09:00", "09:30"), _appt("b", "09:15", "09:45")])
    a, b = layout.items
    assert (a.lane_index, b.lane_index) == (0, 1)
    assert a.lane_count_at_overlap == b.lane_count_at_overlap == 2
    assert (a.width, b.width) == (0.5, 0.5)
    assert (a.left, b.left) == (0.0, 0.5)
    assert layout.lane_count == 2


def test_back_to_back_short_slots_separate_visually() -> None:
    layout = compute_layout([_appt("a", "09:00", "09:10"), _appt("b", "09:10", "09:20")])
    a, b = layout.items
    assert (a.effective_start, a.effective_end) == (540, 555)
    assert (b.effective_start, b.effective_end) == (550, 565)
    assert a.lane_index != b.lane_index
    # True intervals are left untouched for display.
    assert (a.start, a.end) == (540, 550)


def test_back_to_back_long_slots_share_lane() -> None:
    layout = compute_layout([_appt("a", "09:00", "09:30"), _appt("b", "09:30", "10:00")])
    a, b = layout.items
    assert a.lane_index == b.lane_index == 0
    assert a.lane_count_at_overlap == b.lane_count_at_overlap == 1


def test_identical_events_get_distinct_lanes() -> None:
    layout = compute_layout([_appt(str(i), "09:00", "10:00") for i in range(3)])
    assert [r.lane_index for r in layout.items] == [0, 1, 2]
    for result in layout.items:
        assert result.lane_count_at_overlap == 3
        assert result.width == pytest.approx(1 / 3)


def test_single_event_fills_column() -> None:
    layout = compute_layout([_appt("solo", "11:00 AM", "11:30 AM")])
    (result,) = layout.items
    assert (result.lane_index, result.lane_count_at_overlap) == (0, 1)
    assert (result.width, result.left) == (1.0, 0.0)


def test_missing_end_is_padded_then_widened() -> None:
    layout = compute_layout([_appt("x", "14:00")])
    (result,) = layout.items
    assert (result.start, result.end) == (840, 850)
    assert result.effective_end == 855
    assert result.end_padded


@pytest.mark.parametrize("end", ["13:00", "14:00", "nonsense", ""])
def test_end_not_after_start_falls_back_to_min_slot(end: str) -> None:
    (result,) = compute_layout([_appt("x", "14:00", end)]).items
    assert result.end == 850


def test_malformed_start_reported_per_event() -> None:
    layout = compute_layout([_appt("ok1", "10:00", "10:30"), _appt("bad", "quarter past"), _appt("ok2", "10:15", "10:45")])
    ok1, bad, ok2 = layout.items
    assert isinstance(bad, InvalidInterval)
    assert bad.event_id == "bad"
    assert bad.raw_start == "quarter past"
    assert isinstance(ok1, LayoutResult) and isinstance(ok2, LayoutResult)
    assert (ok1.lane_index, ok2.lane_index) == (0, 1)
    assert not layout.ok
    assert [i.event_id for i in layout.invalid] == ["bad"]
    with pytest.raises(LayoutError):
        layout.raise_for_errors()


def test_empty_input() -> None:
    layout = compute_layout([])
    assert layout.items == []
    assert layout.lane_count == 0
    assert layout.ok


def test_invalid_config_aborts_whole_call() -> None:
    layout = compute_layout([_appt("a", "09:00")], LayoutConfig(min_slot_minutes=20, visual_min_minutes=15))
    assert isinstance(layout.error, InvalidConfig)
    assert layout.items == []
    with pytest.raises(LayoutError, match="visual_min_minutes"):
        layout.raise_for_errors()


def test_non_positive_min_slot_is_rejected() -> None:
    layout = compute_layout([_appt("a", "09:00")], LayoutConfig(min_slot_minutes=0, visual_min_minutes=15))
    assert layout.error is not None


def test_ties_follow_input_order() -> None:
    events = [_appt("late-id", "09:00", "09:30"), _appt("early-id", "09:00", "09:30")]
    first = compute_layout(events)
    assert [r.lane_index for r in first.items] == [0, 1]
    reversed_layout = compute_layout(list(reversed(events)))
    assert reversed_layout.by_id()["early-id"].lane_index == 0


def test_lowest_free_lane_is_reused() -> None:
    layout = compute_layout(
        [
            _appt("a", "09:00", "10:00"),
            _appt("b", "09:00", "09:30"),
            _appt("c", "09:00", "11:00"),
            _appt("d", "09:45", "10:30"),
        ]
    )
    lanes = {item.event_id: item.lane_index for item in layout.items}
    # "b" frees lane 1 at 09:30; "d" takes it rather than opening lane 3.
    assert lanes == {"a": 0, "b": 1, "c": 2, "d": 1}
    assert layout.lane_count == 3


def test_overlap_counts_are_local() -> None:
    # a overlaps b, b overlaps c, a and c are disjoint.
    layout = compute_layout(
        [
            _appt("a", "09:00", "09:30"),
            _appt("b", "09:20", "10:00"),
            _appt("c", "09:40", "10:10"),
        ]
    )
    by_id = layout.by_id()
    assert by_id["a"].lane_index == 0 and by_id["c"].lane_index == 0
    assert by_id["b"].lane_index == 1
    assert [by_id[k].lane_count_at_overlap for k in "abc"] == [2, 2, 2]


def _random_day(rng: random.Random) -> list[Appointment]:
    events = []
    for idx in range(rng.randint(0, 14)):
        start = rng.randrange(600, 1190, 5)
        duration = rng.choice([None, -5, 0, 5, 10, 15, 20, 30, 45, 60, 90])
        end = None if duration is None else start + duration
        events.append(_appt(f"e{idx}", start, end))
    return events


@pytest.mark.parametrize("seed", range(40))
def test_random_days_hold_layout_invariants(seed: int) -> None:
    rng = random.Random(seed)
    events = _random_day(rng)
    config = LayoutConfig()
    layout = compute_layout(events, config)
    results = layout.items

    assert len(results) == len(events)
    assert [r.event_id for r in results] == [e.event_id for e in events]

    for i, a in enumerate(results):
        assert 1 <= a.lane_count_at_overlap
        assert a.lane_index < a.lane_count_at_overlap
        for b in results[i + 1 :]:
            if intervals_overlap(a.effective_start, a.effective_end, b.effective_start, b.effective_end):
                assert a.lane_index != b.lane_index

    intervals = [normalize_interval(e.start, e.end, config) for e in events]
    assert layout.lane_count == max_concurrency(intervals)

    assert compute_layout(events, config) == layout

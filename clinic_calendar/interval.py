from __future__ import annotations

from .model import LayoutConfig, NormalizedInterval, TimeValue
from .time_parse import parse_optional_time, parse_time_of_day


def normalize_interval(start: TimeValue, end: TimeValue, config: LayoutConfig) -> NormalizedInterval:
    """
    Turn a raw (start, end) pair into a well-formed interval.

    A missing, unparsable or non-positive end falls back to `start + min_slot_minutes`.
    The effective end used for collisions is widened to at least `visual_min_minutes`
    so short back-to-back slots still separate into lanes; the true end is kept for display.

    Raises ValueError when `start` itself is not a valid time-of-day.
    """
    start_min = parse_time_of_day(start)
    end_min = parse_optional_time(end, allow_end_of_day=True)

    end_padded = False
    if end_min is None or end_min <= start_min:
        end_min = start_min + config.min_slot_minutes
        end_padded = True

    duration = end_min - start_min
    effective_end = start_min + max(duration, config.visual_min_minutes)
    return NormalizedInterval(
        start=start_min,
        end=end_min,
        effective_start=start_min,
        effective_end=effective_end,
        end_padded=end_padded,
    )


def true_interval(start: TimeValue, end: TimeValue, *, min_slot_minutes: int) -> tuple[int, int]:
    """(start, end) in minutes with only the missing/invalid-end fallback applied."""
    start_min = parse_time_of_day(start)
    end_min = parse_optional_time(end, allow_end_of_day=True)
    if end_min is None or end_min <= start_min:
        end_min = start_min + min_slot_minutes
    return start_min, end_min


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and b_start < a_end

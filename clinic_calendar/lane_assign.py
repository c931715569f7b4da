from __future__ import annotations

from typing import Sequence

from .interval import intervals_overlap
from .model import NormalizedInterval


def sort_order(intervals: Sequence[NormalizedInterval]) -> list[int]:
    """Indices of `intervals` by effective start; `sorted` is stable, so input order breaks ties."""
    return sorted(range(len(intervals)), key=lambda idx: intervals[idx].effective_start)


def assign_lanes(intervals: Sequence[NormalizedInterval]) -> list[int]:
    """
    First-fit greedy lane assignment over effective intervals.

    Returns one lane index per interval, in input order. Each interval goes to the
    lowest-indexed lane whose last placed interval has ended by its start; a new lane
    is opened only when every existing lane is still busy.
    """
    lanes: list[int] = []  # effective_end of the last interval placed in each lane
    assigned: list[int] = [0] * len(intervals)
    for idx in sort_order(intervals):
        interval = intervals[idx]
        for lane_idx, lane_end in enumerate(lanes):
            if lane_end <= interval.effective_start:
                lanes[lane_idx] = interval.effective_end
                assigned[idx] = lane_idx
                break
        else:
            lanes.append(interval.effective_end)
            assigned[idx] = len(lanes) - 1
    return assigned


def overlap_lane_counts(intervals: Sequence[NormalizedInterval], lanes: Sequence[int]) -> list[int]:
    """
    For each interval, the number of distinct lanes among intervals that overlap it (itself included).

    Overlap is not transitive, so this is evaluated per interval rather than per cluster.
    """
    counts: list[int] = []
    for idx, interval in enumerate(intervals):
        seen = {lanes[idx]}
        for other_idx, other in enumerate(intervals):
            if other_idx == idx:
                continue
            if intervals_overlap(
                other.effective_start,
                other.effective_end,
                interval.effective_start,
                interval.effective_end,
            ):
                seen.add(lanes[other_idx])
        counts.append(len(seen))
    return counts


def max_concurrency(intervals: Sequence[NormalizedInterval]) -> int:
    """Largest number of effective intervals open at any instant (ends close before starts open)."""
    points: list[tuple[int, int]] = []
    for interval in intervals:
        points.append((interval.effective_start, 1))
        points.append((interval.effective_end, -1))
    points.sort(key=lambda p: (p[0], p[1]))
    best = 0
    current = 0
    for _, delta in points:
        current += delta
        best = max(best, current)
    return best

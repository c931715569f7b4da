from __future__ import annotations

import logging
from typing import Iterable, Optional

from .interval import normalize_interval
from .lane_assign import assign_lanes, overlap_lane_counts
from .model import (
    Appointment,
    DayLayout,
    InvalidConfig,
    InvalidInterval,
    LayoutConfig,
    LayoutItem,
    LayoutResult,
    NormalizedInterval,
)

logger = logging.getLogger(__name__)


def check_config(config: LayoutConfig) -> Optional[InvalidConfig]:
    if config.min_slot_minutes <= 0:
        return InvalidConfig(
            min_slot_minutes=config.min_slot_minutes,
            visual_min_minutes=config.visual_min_minutes,
            reason=f"min_slot_minutes must be positive (got {config.min_slot_minutes})",
        )
    if config.visual_min_minutes < config.min_slot_minutes:
        return InvalidConfig(
            min_slot_minutes=config.min_slot_minutes,
            visual_min_minutes=config.visual_min_minutes,
            reason=(
                f"visual_min_minutes ({config.visual_min_minutes}) must be >= "
                f"min_slot_minutes ({config.min_slot_minutes})"
            ),
        )
    return None


def compute_layout(events: Iterable[Appointment], config: LayoutConfig | None = None) -> DayLayout:
    """
    Lay out one day's appointments into side-by-side lanes.

    Every input event yields exactly one item, in input order: a `LayoutResult` or, when its
    start cannot be parsed, an `InvalidInterval`. A bad config yields an empty layout with
    `error` set. Nothing is raised and nothing is kept between calls.
    """
    config = config or LayoutConfig()
    events = list(events)

    error = check_config(config)
    if error is not None:
        logger.error("Rejected layout config: %s", error.reason)
        return DayLayout(items=[], lane_count=0, error=error)

    items: list[Optional[LayoutItem]] = [None] * len(events)
    valid_idx: list[int] = []
    intervals: list[NormalizedInterval] = []
    for idx, event in enumerate(events):
        try:
            interval = normalize_interval(event.start, event.end, config)
        except ValueError as exc:
            logger.warning("Appointment %s has an invalid start: %s", event.event_id, exc)
            items[idx] = InvalidInterval(event_id=event.event_id, raw_start=event.start, reason=str(exc))
            continue
        if interval.end_padded:
            logger.debug("Appointment %s end %r padded to %d", event.event_id, event.end, interval.end)
        valid_idx.append(idx)
        intervals.append(interval)

    lanes = assign_lanes(intervals)
    counts = overlap_lane_counts(intervals, lanes)
    for pos, idx in enumerate(valid_idx):
        interval = intervals[pos]
        items[idx] = LayoutResult(
            event_id=events[idx].event_id,
            lane_index=lanes[pos],
            lane_count_at_overlap=counts[pos],
            effective_start=interval.effective_start,
            effective_end=interval.effective_end,
            start=interval.start,
            end=interval.end,
            end_padded=interval.end_padded,
        )

    lane_count = len(set(lanes))
    logger.debug("Laid out %d appointment(s) into %d lane(s)", len(intervals), lane_count)
    return DayLayout(items=[item for item in items if item is not None], lane_count=lane_count)

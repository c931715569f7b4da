from __future__ import annotations

from .model import GridConfig, TimeValue
from .time_parse import format_time_of_day, parse_optional_time


def slot_minutes(grid: GridConfig) -> list[int]:
    """Bookable start times from the first to the last grid hour inclusive."""
    step = max(1, int(grid.slot_minutes))
    return list(range(grid.start_minutes, grid.end_minutes + 1, step))


def time_slots(grid: GridConfig) -> list[str]:
    return [format_time_of_day(minutes) for minutes in slot_minutes(grid)]


def default_end(start: TimeValue, grid: GridConfig) -> str:
    """
    End time the booking form proposes for a given start: the next slot.

    When `start` is the last slot or not on the grid at all, the start itself is returned
    (the layout engine then pads it to the minimum slot).
    """
    minutes = slot_minutes(grid)
    start_min = parse_optional_time(start)
    if start_min is not None and start_min in minutes:
        pos = minutes.index(start_min)
        if pos < len(minutes) - 1:
            return format_time_of_day(minutes[pos + 1])
    if start_min is not None:
        return format_time_of_day(start_min)
    return "" if start is None else str(start)

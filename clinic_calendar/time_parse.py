from __future__ import annotations

import re

from .model import TimeValue


MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])?$")


def parse_time_of_day(value: TimeValue, *, allow_end_of_day: bool = False) -> int:
    """
    Convert a wall-clock time into minutes since midnight.

    Accepts:
    - an int already in minutes (0..1439)
    - 12-hour strings as the booking form writes them (e.g., "10:00 AM", "08:15 pm")
    - 24-hour strings (e.g., "14:30")

    With `allow_end_of_day`, midnight at the close of the day (1440 or "24:00") is accepted too;
    only end times use it.
    """
    if allow_end_of_day and (value == MINUTES_PER_DAY or (isinstance(value, str) and value.strip() == "24:00")):
        return MINUTES_PER_DAY
    if isinstance(value, bool):
        raise ValueError(f"Invalid time-of-day {value!r}")
    if isinstance(value, int):
        if value < 0 or value >= MINUTES_PER_DAY:
            raise ValueError(f"Invalid time-of-day {value} (expected 0-{MINUTES_PER_DAY - 1} minutes)")
        return value
    if value is None:
        raise ValueError("Time-of-day is required")

    raw = str(value).strip()
    match = _CLOCK_RE.match(raw)
    if not match:
        raise ValueError(f"Invalid time-of-day '{raw}' (expected 'hh:mm AM' or 'HH:MM')")
    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = (match.group(3) or "").upper()
    if minute > 59:
        raise ValueError(f"Invalid minute in '{raw}'")
    if meridiem:
        if hour < 1 or hour > 12:
            raise ValueError(f"Invalid hour in '{raw}' (expected 1-12 with AM/PM)")
        hour = hour % 12
        if meridiem == "PM":
            hour += 12
    elif hour > 23:
        raise ValueError(f"Invalid hour in '{raw}' (expected 0-23)")
    return hour * 60 + minute


def parse_optional_time(value: TimeValue, *, allow_end_of_day: bool = False) -> int | None:
    """Like `parse_time_of_day`, but blank or unparsable values come back as None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return parse_time_of_day(value, allow_end_of_day=allow_end_of_day)
    except ValueError:
        return None


def format_time_of_day(minutes: int) -> str:
    """Format minutes since midnight the way the booking form shows times ("hh:mm AM")."""
    minutes = int(minutes) % MINUTES_PER_DAY
    hour, minute = divmod(minutes, 60)
    meridiem = "AM" if hour < 12 else "PM"
    hour12 = hour % 12 or 12
    return f"{hour12:02d}:{minute:02d} {meridiem}"


def format_clock(minutes: int) -> str:
    """24-hour "HH:MM"; values past midnight keep counting (e.g., "24:05")."""
    hour, minute = divmod(int(minutes), 60)
    return f"{hour:02d}:{minute:02d}"

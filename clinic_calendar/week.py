from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from .layout import compute_layout
from .model import Appointment, DayLayout, LayoutConfig

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class WeekLayout:
    days: list[dt.date]
    appointments: dict[dt.date, list[Appointment]]
    layouts: dict[dt.date, DayLayout]


def week_start(anchor: dt.date) -> dt.date:
    """Monday of the week containing `anchor`."""
    return anchor - dt.timedelta(days=anchor.weekday())


def week_days(anchor: dt.date) -> list[dt.date]:
    start = week_start(anchor)
    return [start + dt.timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def shift_week(anchor: dt.date, weeks: int) -> dt.date:
    return anchor + dt.timedelta(days=DAYS_PER_WEEK * weeks)


def group_by_day(appointments: Iterable[Appointment], days: Sequence[dt.date]) -> dict[dt.date, list[Appointment]]:
    grouped: dict[dt.date, list[Appointment]] = {day: [] for day in days}
    for appointment in appointments:
        if appointment.day is None:
            logger.debug("Skipping appointment %s without a date", appointment.event_id)
            continue
        bucket = grouped.get(appointment.day)
        if bucket is None:
            logger.debug("Skipping appointment %s on %s (outside week)", appointment.event_id, appointment.day)
            continue
        bucket.append(appointment)
    return grouped


def layout_week(
    appointments: Iterable[Appointment],
    anchor: dt.date,
    config: LayoutConfig | None = None,
) -> WeekLayout:
    days = week_days(anchor)
    grouped = group_by_day(appointments, days)
    layouts = {day: compute_layout(grouped[day], config) for day in days}
    return WeekLayout(days=days, appointments=grouped, layouts=layouts)

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path

from .config import CalendarConfig
from .layout import check_config
from .model import LayoutError
from .svg_render import render_week_svg
from .tsv_io import read_appointments
from .week import WeekLayout, layout_week

logger = logging.getLogger(__name__)


def build_week(
    *,
    input_tsv: Path,
    week_of: dt.date,
    config: CalendarConfig,
    strict: bool = False,
) -> WeekLayout:
    if not input_tsv.exists():
        raise FileNotFoundError(f"Input TSV not found: {input_tsv}")

    error = check_config(config.layout)
    if error is not None:
        raise LayoutError(error.reason)

    appointments = read_appointments(input_tsv)
    week = layout_week(appointments, week_of, config.layout)

    total = sum(len(week.appointments[day]) for day in week.days)
    logger.info("Loaded %d appointment(s) for week of %s from %s", total, week.days[0], input_tsv)
    for day in week.days:
        layout = week.layouts[day]
        if strict:
            layout.raise_for_errors()
        for bad in layout.invalid:
            logger.warning("%s: appointment %s shown as fallback box (%s)", day, bad.event_id, bad.reason)
    return week


def build_calendar_svg(
    *,
    input_tsv: Path,
    output_svg: Path,
    week_of: dt.date,
    config: CalendarConfig,
    strict: bool = False,
    today: dt.date | None = None,
) -> WeekLayout:
    week = build_week(input_tsv=input_tsv, week_of=week_of, config=config, strict=strict)
    render_week_svg(week=week, grid=config.grid, style=config.style, output_path=output_svg, today=today)
    logger.info("Wrote %s", output_svg)
    return week

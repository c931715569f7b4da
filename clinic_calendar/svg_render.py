from __future__ import annotations

import datetime as dt
from html import escape
from pathlib import Path

from .config import StyleConfig
from .geometry import box_geometry, is_on_grid
from .model import Appointment, GridConfig, InvalidInterval, LayoutResult
from .time_parse import format_time_of_day
from .tones import card_tone
from .week import WeekLayout


CARD_PADDING_PX = 2.0
CARD_INSET_PX = 4.0


def _hour_label(hour: int) -> str:
    return format_time_of_day(hour * 60).replace(":00", "")


def _card_title(appointment: Appointment, style: StyleConfig) -> str:
    if appointment.kind == style.unavailable_kind:
        return "CLOSED"
    return appointment.patient_name or appointment.event_id


def _render_card(
    *,
    parts: list[str],
    appointment: Appointment,
    item: LayoutResult | InvalidInterval,
    grid: GridConfig,
    style: StyleConfig,
    column_x: float,
    grid_top: float,
) -> None:
    box = box_geometry(item, grid)
    tone = card_tone(
        appointment,
        unavailable_kind=style.unavailable_kind,
        panchkarma_marker=style.panchkarma_marker,
        cosmetology_markers=style.cosmetology_markers,
    )
    inner_w = style.column_width_px - 2 * CARD_PADDING_PX
    x = column_x + CARD_PADDING_PX + box.left * inner_w
    y = grid_top + box.top_px
    w = max(1.0, box.width * inner_w - 1.0)
    h = box.height_px
    klass = f"card tone-{tone}" + (" fallback" if box.fallback else "")

    parts.append(f'<g class="{klass}" data-id="{escape(appointment.event_id)}">')
    parts.append(f'<rect class="card-bg" x="{x:.1f}" y="{y:.1f}" width="{w:.1f}" height="{h:.1f}" rx="2"/>')
    parts.append(f'<rect class="card-edge" x="{x:.1f}" y="{y:.1f}" width="3" height="{h:.1f}"/>')
    parts.append(
        f'<text class="card-title" x="{x + CARD_INSET_PX + 2:.1f}" y="{y + 13:.1f}">'
        f"{escape(_card_title(appointment, style))}</text>"
    )
    if isinstance(item, LayoutResult) and box.show_details and tone != "unavailable":
        time_range = f"{format_time_of_day(item.start)} - {format_time_of_day(item.end)}"
        parts.append(f'<text class="card-meta" x="{x + CARD_INSET_PX + 2:.1f}" y="{y + 26:.1f}">{escape(time_range)}</text>')
        parts.append(f'<text class="card-kind" x="{x + CARD_INSET_PX + 2:.1f}" y="{y + 38:.1f}">{escape(appointment.kind.upper())}</text>')
    elif isinstance(item, InvalidInterval):
        parts.append(
            f'<text class="card-meta" x="{x + CARD_INSET_PX + 2:.1f}" y="{y + 26:.1f}">'
            f"time? {escape(str(item.raw_start))}</text>"
        )
    parts.append("</g>")


def render_week_svg(
    *,
    week: WeekLayout,
    grid: GridConfig,
    style: StyleConfig,
    output_path: Path,
    today: dt.date | None = None,
) -> None:
    gutter = style.time_gutter_px
    header_h = style.header_height_px
    width = gutter + style.column_width_px * len(week.days)
    height = int(header_h + grid.column_height_px + 16)
    grid_top = float(header_h)

    parts: list[str] = []
    parts.append('<?xml version="1.0" encoding="UTF-8"?>')
    parts.append(f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}">')
    parts.append("<style><![CDATA[")
    parts.append(
        """
        .bg { fill: #fdfbf7; }
        .hour-line { stroke: #f0ede6; stroke-width: 1; }
        .column-line { stroke: #e5e1d8; stroke-width: 1; }
        .hour-label { font-family: sans-serif; font-size: 11px; font-weight: 700; fill: #9ca3af; text-anchor: end; }
        .day-label { font-family: sans-serif; font-size: 12px; font-weight: 700; fill: #1e3a29; }
        .today .day-header { fill: #f3ecde; }
        .day-header { fill: #ffffff; }
        .card-title { font-family: sans-serif; font-size: 11px; font-weight: 700; }
        .card-meta { font-family: sans-serif; font-size: 10px; opacity: 0.8; }
        .card-kind { font-family: sans-serif; font-size: 9px; font-weight: 700; letter-spacing: 0.05em; }
        .tone-standard .card-bg { fill: #e8ebe9; } .tone-standard .card-edge { fill: #1e3a29; } .tone-standard text { fill: #1e3a29; }
        .tone-panchkarma .card-bg { fill: #f3ecde; } .tone-panchkarma .card-edge { fill: #c5a059; } .tone-panchkarma text { fill: #7d5f2a; }
        .tone-cosmetology .card-bg { fill: #faf5ff; } .tone-cosmetology .card-edge { fill: #9333ea; } .tone-cosmetology text { fill: #581c87; }
        .tone-unavailable .card-bg { fill: #f3f4f6; opacity: 0.9; } .tone-unavailable .card-edge { fill: #9ca3af; } .tone-unavailable text { fill: #6b7280; }
        .fallback .card-bg { stroke: #b91c1c; stroke-dasharray: 4 2; }
        """
    )
    parts.append("]]></style>")
    parts.append('<rect class="bg" x="0" y="0" width="100%" height="100%"/>')

    for hour in range(grid.start_hour, grid.end_hour + 1):
        y = grid_top + (hour - grid.start_hour) * 60 * grid.px_per_minute
        parts.append(f'<line class="hour-line" x1="{gutter}" y1="{y:.1f}" x2="{width}" y2="{y:.1f}"/>')
        parts.append(f'<text class="hour-label" x="{gutter - 8}" y="{y + 4:.1f}">{escape(_hour_label(hour))}</text>')

    for col, day in enumerate(week.days):
        column_x = float(gutter + col * style.column_width_px)
        day_class = "day today" if today == day else "day"
        parts.append(f'<g class="{day_class}" data-date="{day.isoformat()}">')
        parts.append(f'<rect class="day-header" x="{column_x:.1f}" y="0" width="{style.column_width_px}" height="{header_h}"/>')
        parts.append(
            f'<text class="day-label" x="{column_x + 8:.1f}" y="{header_h / 2 + 4:.1f}">'
            f"{escape(day.strftime('%a %d'))}</text>"
        )
        parts.append(
            f'<line class="column-line" x1="{column_x:.1f}" y1="0" x2="{column_x:.1f}" y2="{height}"/>'
        )

        appointments = week.appointments.get(day, [])
        layout = week.layouts.get(day)
        if layout is not None:
            # Items come back in the same order as the day's appointments.
            for appointment, item in zip(appointments, layout.items):
                if isinstance(item, LayoutResult) and not is_on_grid(item, grid):
                    continue
                _render_card(
                    parts=parts,
                    appointment=appointment,
                    item=item,
                    grid=grid,
                    style=style,
                    column_x=column_x,
                    grid_top=grid_top,
                )
        parts.append("</g>")

    parts.append("</svg>")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(parts) + "\n", encoding="utf-8")

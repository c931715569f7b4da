from __future__ import annotations

import argparse
import datetime as dt
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import CalendarConfig
from .conflicts import conflict_message, find_conflict
from .geometry import day_geometry
from .layout import compute_layout
from .logging_utils import setup_logging
from .model import Appointment, InvalidInterval, LayoutError
from .pipeline import build_calendar_svg
from .slots import default_end, time_slots
from .time_parse import format_clock
from .tsv_io import read_appointments, write_sample_tsv

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (expected YYYY-MM-DD)") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clinic-calendar", description="Clinic weekly calendar layout tools")
    parser.add_argument("--config", type=Path, default=Path("calendar.config.toml"), help="TOML config file")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    parser.add_argument("--strict", action="store_true", help="Fail when any appointment cannot be laid out")
    sub = parser.add_subparsers(dest="command", required=True)

    p_layout = sub.add_parser("layout", help="Print one day's lane layout as JSON")
    p_layout.add_argument("input", type=Path)
    p_layout.add_argument("--date", type=_parse_date, required=True)

    p_render = sub.add_parser("render", help="Render a week as SVG")
    p_render.add_argument("input", type=Path)
    p_render.add_argument("--week-of", type=_parse_date, default=dt.date.today())
    p_render.add_argument("-o", "--output", type=Path, default=Path(".output/calendar.svg"))

    sub.add_parser("slots", help="List bookable time slots")

    p_check = sub.add_parser("check", help="Check a new booking against existing appointments")
    p_check.add_argument("input", type=Path)
    p_check.add_argument("--date", type=_parse_date, required=True)
    p_check.add_argument("--start", required=True)
    p_check.add_argument("--end", default=None)
    p_check.add_argument("--doctor", required=True)
    p_check.add_argument("--kind", default="Consultation")

    p_init = sub.add_parser("init-config", help="Write the default config file")
    p_init.add_argument("path", type=Path)

    p_sample = sub.add_parser("sample-tsv", help="Write a sample appointments TSV")
    p_sample.add_argument("path", type=Path)
    return parser


def _cmd_layout(args: argparse.Namespace, config: CalendarConfig) -> int:
    appointments = [a for a in read_appointments(args.input) if a.day == args.date]
    layout = compute_layout(appointments, config.layout)
    if layout.error is not None:
        raise SystemExit(f"Invalid layout config: {layout.error.reason}")
    if args.strict:
        layout.raise_for_errors()

    items = []
    for item, box in zip(layout.items, day_geometry(layout, config.grid)):
        if isinstance(item, InvalidInterval):
            items.append({"event_id": item.event_id, "invalid": True, "reason": item.reason, "top_px": box.top_px, "height_px": box.height_px})
            continue
        items.append(
            {
                "event_id": item.event_id,
                "lane_index": item.lane_index,
                "lane_count_at_overlap": item.lane_count_at_overlap,
                "start": format_clock(item.start),
                "end": format_clock(item.end),
                "effective_start": format_clock(item.effective_start),
                "effective_end": format_clock(item.effective_end),
                "left": round(item.left, 4),
                "width": round(item.width, 4),
                "top_px": round(box.top_px, 1),
                "height_px": round(box.height_px, 1),
            }
        )
    json.dump({"date": args.date.isoformat(), "lane_count": layout.lane_count, "items": items}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def _cmd_check(args: argparse.Namespace, config: CalendarConfig) -> int:
    existing = read_appointments(args.input)
    start = args.start
    candidate = Appointment(
        event_id="<new>",
        start=start,
        end=args.end or default_end(start, config.grid),
        kind=args.kind,
        day=args.date,
        doctor=args.doctor,
    )
    conflict = find_conflict(
        candidate,
        existing,
        unavailable_kind=config.style.unavailable_kind,
        min_slot_minutes=config.layout.min_slot_minutes,
    )
    if conflict is not None:
        print(f"CONFLICT with {conflict.event_id}: {conflict_message(conflict)}")
        return 1
    print("OK")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        config = CalendarConfig.from_file(args.config)
        log_file = Path(config.logging.file) if config.logging.file else None
        setup_logging(args.log_level or config.logging.level, log_file=log_file, format_string=config.logging.format, stream=sys.stderr)
    except ValueError as exc:
        raise SystemExit(str(exc)) from None

    try:
        if args.command == "layout":
            return _cmd_layout(args, config)
        if args.command == "render":
            build_calendar_svg(
                input_tsv=args.input,
                output_svg=args.output,
                week_of=args.week_of,
                config=config,
                strict=args.strict,
                today=dt.date.today(),
            )
            return 0
        if args.command == "slots":
            print("\n".join(time_slots(config.grid)))
            return 0
        if args.command == "check":
            return _cmd_check(args, config)
        if args.command == "init-config":
            config.to_file(args.path)
            logger.info("Wrote %s", args.path)
            return 0
        if args.command == "sample-tsv":
            write_sample_tsv(args.path)
            logger.info("Wrote %s", args.path)
            return 0
    except LayoutError as exc:
        logger.error("%s", exc)
        return 2
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(str(exc)) from None
    raise SystemExit(f"Unknown command '{args.command}'")


if __name__ == "__main__":
    raise SystemExit(main())

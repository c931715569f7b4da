from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from clinic_calendar.config import CalendarConfig, StyleConfig
from clinic_calendar.model import Appointment, GridConfig, LayoutError
from clinic_calendar.pipeline import build_calendar_svg
from clinic_calendar.svg_render import render_week_svg
from clinic_calendar.tsv_io import write_sample_tsv
from clinic_calendar.week import layout_week


def test_sample_week_renders(tmp_path: Path) -> None:
    tsv = tmp_path / "appointments.tsv"
    write_sample_tsv(tsv)
    out = tmp_path / "calendar.svg"
    week = build_calendar_svg(
        input_tsv=tsv,
        output_svg=out,
        week_of=dt.date(2026, 10, 21),
        config=CalendarConfig(),
        today=dt.date(2026, 10, 19),
    )
    svg = out.read_text(encoding="utf-8")
    assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert svg.count('class="day') >= 7
    assert 'class="day today" data-date="2026-10-19"' in svg
    assert 'data-id="RAIPD-0001"' in svg
    assert "tone-panchkarma" in svg
    assert "tone-cosmetology" in svg
    assert "CLOSED" in svg
    assert "10 AM" in svg and "08 PM" in svg
    assert week.layouts[dt.date(2026, 10, 20)].lane_count == 2


def test_invalid_rows_render_as_fallback(tmp_path: Path) -> None:
    tsv = tmp_path / "appointments.tsv"
    tsv.write_text(
        "event_id\tdate\tstart\tpatient_name\n"
        "x1\t2026-10-19\tten-ish\tA & B\n",
        encoding="utf-8",
    )
    out = tmp_path / "calendar.svg"
    build_calendar_svg(input_tsv=tsv, output_svg=out, week_of=dt.date(2026, 10, 19), config=CalendarConfig())
    svg = out.read_text(encoding="utf-8")
    assert "card tone-standard fallback" in svg
    assert "A &amp; B" in svg
    assert "time? ten-ish" in svg


def test_strict_mode_rejects_invalid_rows(tmp_path: Path) -> None:
    tsv = tmp_path / "appointments.tsv"
    tsv.write_text("event_id\tdate\tstart\nx1\t2026-10-19\tten-ish\n", encoding="utf-8")
    with pytest.raises(LayoutError):
        build_calendar_svg(
            input_tsv=tsv,
            output_svg=tmp_path / "calendar.svg",
            week_of=dt.date(2026, 10, 19),
            config=CalendarConfig(),
            strict=True,
        )


def test_missing_input(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        build_calendar_svg(
            input_tsv=tmp_path / "missing.tsv",
            output_svg=tmp_path / "calendar.svg",
            week_of=dt.date(2026, 10, 19),
            config=CalendarConfig(),
        )


def test_cards_pair_with_their_own_appointment(tmp_path: Path) -> None:
    day = dt.date(2026, 10, 19)
    appointments = [
        Appointment("x", "10:00 AM", "10:30 AM", kind="Panchkarma", day=day, patient_name="Morning"),
        Appointment("x", "11:00 AM", "11:30 AM", day=day, patient_name="Late"),
    ]
    week = layout_week(appointments, day)
    out = tmp_path / "calendar.svg"
    render_week_svg(week=week, grid=GridConfig(), style=StyleConfig(), output_path=out)
    svg = out.read_text(encoding="utf-8")
    morning = svg[svg.rfind("<g ", 0, svg.index(">Morning<")) : svg.index(">Morning<")]
    late = svg[svg.rfind("<g ", 0, svg.index(">Late<")) : svg.index(">Late<")]
    assert morning.startswith('<g class="card tone-panchkarma" data-id="x">')
    assert late.startswith('<g class="card tone-standard" data-id="x">')
    assert 'y="48.0"' in morning
    assert 'y="156.0"' in late

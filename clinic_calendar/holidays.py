from __future__ import annotations

import datetime as dt

from .model import Appointment, GridConfig


HOLIDAY_PATIENT = "HOLIDAY / CLOSED"


def holiday_block(
    day: dt.date,
    grid: GridConfig,
    *,
    event_id: str | None = None,
    unavailable_kind: str = "Unavailable",
) -> Appointment:
    """An all-doctors block covering every visible hour of `day`."""
    return Appointment(
        event_id=event_id or f"holiday-{day.isoformat()}",
        start=grid.start_minutes,
        end=grid.end_minutes,
        kind=unavailable_kind,
        day=day,
        doctor="All",
        patient_name=HOLIDAY_PATIENT,
        payload={"phone": "-"},
    )

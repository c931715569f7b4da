from __future__ import annotations

import csv
import datetime as dt
from pathlib import Path
from typing import Iterable

from .model import Appointment, AppointmentRow


REQUIRED_COLUMNS = [
    "event_id",
    "date",
    "start",
]

SAMPLE_COLUMNS = [
    "event_id",
    "date",
    "start",
    "end",
    "kind",
    "doctor",
    "patient_name",
    "status",
]

KNOWN_COLUMNS = set(SAMPLE_COLUMNS)


def read_tsv(path: Path) -> list[AppointmentRow]:
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle, delimiter="\t")
        if not reader.fieldnames:
            raise ValueError(f"{path} has no header row.")
        # Allow column-aligned headers with spaces.
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
        missing = [name for name in REQUIRED_COLUMNS if name not in reader.fieldnames]
        if missing:
            raise ValueError(f"{path} is missing required column(s): {', '.join(missing)}")

        rows: list[AppointmentRow] = []
        seen: set[tuple[str, str]] = set()
        for idx, raw in enumerate(reader, start=2):
            event_id = (raw.get("event_id") or "").strip()
            if not event_id:
                raise ValueError(f"{path}:{idx} event_id is required")
            date = (raw.get("date") or "").strip()
            if not date:
                raise ValueError(f"{path}:{idx} date is required")
            try:
                dt.date.fromisoformat(date)
            except ValueError:
                raise ValueError(f"{path}:{idx} invalid date '{date}' (expected YYYY-MM-DD)") from None
            if (date, event_id) in seen:
                raise ValueError(f"{path}:{idx} duplicate event_id '{event_id}' on {date}")
            seen.add((date, event_id))
            start = (raw.get("start") or "").strip()
            if not start:
                raise ValueError(f"{path}:{idx} start is required")
            extra = {
                name: (value or "").strip()
                for name, value in raw.items()
                if name is not None and name not in KNOWN_COLUMNS
            }
            rows.append(
                AppointmentRow(
                    event_id=event_id,
                    date=date,
                    start=start,
                    end=(raw.get("end") or "").strip(),
                    kind=(raw.get("kind") or "").strip() or "Consultation",
                    doctor=(raw.get("doctor") or "").strip(),
                    patient_name=(raw.get("patient_name") or "").strip(),
                    status=(raw.get("status") or "").strip().upper() or "SCHEDULED",
                    extra=extra,
                )
            )
        return rows


def rows_to_appointments(rows: Iterable[AppointmentRow]) -> list[Appointment]:
    # Times stay as raw strings; the layout engine reports unparsable ones per appointment.
    return [
        Appointment(
            event_id=row.event_id,
            start=row.start,
            end=row.end or None,
            kind=row.kind,
            day=dt.date.fromisoformat(row.date),
            doctor=row.doctor,
            patient_name=row.patient_name,
            status=row.status,
            payload=dict(row.extra),
        )
        for row in rows
    ]


def read_appointments(path: Path) -> list[Appointment]:
    return rows_to_appointments(read_tsv(path))


def write_sample_tsv(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=SAMPLE_COLUMNS, delimiter="\t", lineterminator="\n")
        writer.writeheader()
        writer.writerows(
            [
                {
                    "event_id": "RAOPD-0001",
                    "date": "2026-10-19",
                    "start": "10:00 AM",
                    "end": "10:30 AM",
                    "kind": "Consultation",
                    "doctor": "Dr. Chirag",
                    "patient_name": "Meera Shah",
                    "status": "SCHEDULED",
                },
                {
                    "event_id": "RAOPD-0002",
                    "date": "2026-10-19",
                    "start": "10:15 AM",
                    "end": "10:45 AM",
                    "kind": "Consultation",
                    "doctor": "Cosmetology",
                    "patient_name": "Ravi Patel",
                    "status": "SCHEDULED",
                },
                {
                    "event_id": "RAIPD-0001",
                    "date": "2026-10-19",
                    "start": "11:00 AM",
                    "end": "12:30 PM",
                    "kind": "Panchkarma - Abhyanga",
                    "doctor": "Dr. Chirag",
                    "patient_name": "Anita Desai",
                    "status": "SCHEDULED",
                },
                {
                    "event_id": "RAOPD-0003",
                    "date": "2026-10-20",
                    "start": "02:00 PM",
                    "end": "",
                    "kind": "Follow-up",
                    "doctor": "Dr. Chirag",
                    "patient_name": "Kiran Joshi",
                    "status": "SCHEDULED",
                },
                {
                    "event_id": "RAOPD-0004",
                    "date": "2026-10-20",
                    "start": "02:10 PM",
                    "end": "02:20 PM",
                    "kind": "Follow-up",
                    "doctor": "Dr. Chirag",
                    "patient_name": "Nisha Rao",
                    "status": "SCHEDULED",
                },
                {
                    "event_id": "holiday-2026-10-24",
                    "date": "2026-10-24",
                    "start": "10:00 AM",
                    "end": "08:00 PM",
                    "kind": "Unavailable",
                    "doctor": "All",
                    "patient_name": "HOLIDAY / CLOSED",
                    "status": "SCHEDULED",
                },
            ]
        )

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union


TimeValue = Union[int, str, None]


class LayoutError(ValueError):
    """Raised by `DayLayout.raise_for_errors` for callers that want fail-fast layouts."""


@dataclass(frozen=True)
class Appointment:
    event_id: str
    start: TimeValue
    end: TimeValue = None
    kind: str = "Consultation"
    day: Optional[dt.date] = None
    doctor: str = ""
    patient_name: str = ""
    status: str = "SCHEDULED"
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AppointmentRow:
    event_id: str
    date: str
    start: str
    end: str
    kind: str
    doctor: str
    patient_name: str
    status: str
    extra: dict[str, str]


@dataclass(frozen=True)
class LayoutConfig:
    min_slot_minutes: int = 10
    visual_min_minutes: int = 15


@dataclass(frozen=True)
class GridConfig:
    start_hour: int = 10
    end_hour: int = 20
    px_per_minute: float = 1.8
    min_box_height_px: float = 30.0
    slot_minutes: int = 15

    @property
    def start_minutes(self) -> int:
        return self.start_hour * 60

    @property
    def end_minutes(self) -> int:
        return self.end_hour * 60

    @property
    def column_height_px(self) -> float:
        return (self.end_hour - self.start_hour) * 60 * self.px_per_minute


@dataclass(frozen=True)
class NormalizedInterval:
    start: int
    end: int
    effective_start: int
    effective_end: int
    end_padded: bool


@dataclass(frozen=True)
class LayoutResult:
    event_id: str
    lane_index: int
    lane_count_at_overlap: int
    effective_start: int
    effective_end: int
    start: int
    end: int
    end_padded: bool = False

    @property
    def width(self) -> float:
        return 1.0 / self.lane_count_at_overlap

    @property
    def left(self) -> float:
        return self.lane_index * self.width

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class InvalidInterval:
    event_id: str
    raw_start: Any
    reason: str


@dataclass(frozen=True)
class InvalidConfig:
    min_slot_minutes: int
    visual_min_minutes: int
    reason: str


LayoutItem = Union[LayoutResult, InvalidInterval]


@dataclass(frozen=True)
class DayLayout:
    items: list[LayoutItem]
    lane_count: int
    error: InvalidConfig | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.invalid

    @property
    def results(self) -> list[LayoutResult]:
        return [item for item in self.items if isinstance(item, LayoutResult)]

    @property
    def invalid(self) -> list[InvalidInterval]:
        return [item for item in self.items if isinstance(item, InvalidInterval)]

    def by_id(self) -> dict[str, LayoutItem]:
        return {item.event_id: item for item in self.items}

    def raise_for_errors(self) -> None:
        if self.error is not None:
            raise LayoutError(self.error.reason)
        bad = self.invalid
        if bad:
            details = "; ".join(f"{item.event_id}: {item.reason}" for item in bad)
            raise LayoutError(f"{len(bad)} appointment(s) could not be laid out: {details}")


@dataclass(frozen=True)
class BoxGeometry:
    event_id: str
    top_px: float
    height_px: float
    left: float
    width: float
    show_details: bool
    fallback: bool = False

from __future__ import annotations

from .layout import compute_layout
from .model import (
    Appointment,
    DayLayout,
    GridConfig,
    InvalidConfig,
    InvalidInterval,
    LayoutConfig,
    LayoutError,
    LayoutResult,
)

__all__ = [
    "Appointment",
    "DayLayout",
    "GridConfig",
    "InvalidConfig",
    "InvalidInterval",
    "LayoutConfig",
    "LayoutError",
    "LayoutResult",
    "compute_layout",
]

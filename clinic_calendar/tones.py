from __future__ import annotations

from typing import Literal

from .model import Appointment

Tone = Literal["unavailable", "cosmetology", "panchkarma", "standard"]


def card_tone(
    appointment: Appointment,
    *,
    unavailable_kind: str = "Unavailable",
    panchkarma_marker: str = "Panchkarma",
    cosmetology_markers: tuple[str, ...] | list[str] = ("Cosmetology",),
) -> Tone:
    if appointment.kind == unavailable_kind:
        return "unavailable"
    doctor = appointment.doctor or ""
    if any(marker and marker in doctor for marker in cosmetology_markers):
        return "cosmetology"
    if panchkarma_marker and panchkarma_marker in (appointment.kind or ""):
        return "panchkarma"
    return "standard"

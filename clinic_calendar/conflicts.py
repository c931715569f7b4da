from __future__ import annotations

import logging
from typing import Iterable, Optional

from .interval import intervals_overlap, true_interval
from .model import Appointment

logger = logging.getLogger(__name__)

CANCELLED = "CANCELLED"


def find_conflict(
    candidate: Appointment,
    existing: Iterable[Appointment],
    *,
    unavailable_kind: str = "Unavailable",
    min_slot_minutes: int = 10,
) -> Optional[Appointment]:
    """
    Return the first booking that blocks `candidate`, or None.

    A blocker is the same doctor, same kind and same day, not cancelled, with a true interval
    overlapping the candidate's. No visual padding is applied here: back-to-back bookings are
    allowed. Blocking time (`unavailable_kind`) never conflicts.

    Raises ValueError when the candidate's start is not a valid time-of-day.
    """
    if candidate.kind == unavailable_kind:
        return None

    cand_start, cand_end = true_interval(candidate.start, candidate.end, min_slot_minutes=min_slot_minutes)
    for other in existing:
        if other.event_id == candidate.event_id:
            continue
        if other.doctor != candidate.doctor or other.kind != candidate.kind or other.day != candidate.day:
            continue
        if (other.status or "").upper() == CANCELLED:
            continue
        try:
            other_start, other_end = true_interval(other.start, other.end, min_slot_minutes=min_slot_minutes)
        except ValueError as exc:
            logger.warning("Ignoring appointment %s during conflict check: %s", other.event_id, exc)
            continue
        if intervals_overlap(cand_start, cand_end, other_start, other_end):
            return other
    return None


def conflict_message(conflict: Appointment) -> str:
    return f"Doctor is already booked for {conflict.kind} at this time."

# fieldservice/services/scheduling.py
"""
Appointment conflict detection.

Appointment windows are half-open intervals [start, end): an appointment
ending at 11:00 and another starting at 11:00 do not overlap.
"""

from datetime import datetime
from typing import Iterable, List, Protocol


class Scheduled(Protocol):
    technician_id: int
    start_time: datetime
    end_time: datetime


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    return start_a < end_b and start_b < end_a


def find_conflicts(
    technician_id: int,
    proposed_start: datetime,
    proposed_end: datetime,
    existing: Iterable[Scheduled],
) -> List[Scheduled]:
    """
    Return the technician's appointments that overlap the proposed window.

    Appointments belonging to other technicians are ignored. A linear scan is
    enough for a single technician's book.
    """
    if proposed_end <= proposed_start:
        raise ValueError("proposed_end must be after proposed_start")

    return [
        appt
        for appt in existing
        if appt.technician_id == technician_id
        and intervals_overlap(proposed_start, proposed_end, appt.start_time, appt.end_time)
    ]


def has_conflict(
    technician_id: int,
    proposed_start: datetime,
    proposed_end: datetime,
    existing: Iterable[Scheduled],
) -> bool:
    return bool(find_conflicts(technician_id, proposed_start, proposed_end, existing))

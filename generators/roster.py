"""
Slot roster builder for the OPD Token Allocator.
Produces deterministic TimeSlot lists: one slot per doctor per hour.
"""

import logging
from datetime import time
from typing import Dict, List, Sequence

from models import TimeSlot

logger = logging.getLogger(__name__)

# Capacity per doctor for the default three-doctor OPD morning
DEFAULT_DOCTORS: Dict[str, int] = {
    "DrA": 4,
    "DrB": 3,
    "DrC": 2,
}
DEFAULT_HOURS: Sequence[int] = (9, 10)


def slot_id_for(doctor_id: str, hour: int) -> str:
    """'DrA', 9 -> 'drA-09'"""
    return f"{doctor_id[0].lower()}{doctor_id[1:]}-{hour:02d}"


def build_roster(doctors: Dict[str, int], hours: Sequence[int], slot_minutes: int = 60) -> List[TimeSlot]:
    """
    Build slots doctor by doctor, hour by hour.
    `doctors` maps doctor id -> capacity of each of that doctor's slots.
    """
    if not 0 < slot_minutes <= 60:
        raise ValueError("slot_minutes must be between 1 and 60")

    slots = []
    for doctor_id, capacity in doctors.items():
        for hour in hours:
            end_minute = hour * 60 + slot_minutes
            slots.append(TimeSlot(
                id=slot_id_for(doctor_id, hour),
                doctor_id=doctor_id,
                start=time(hour, 0),
                end=time(end_minute // 60, end_minute % 60) if end_minute < 24 * 60 else time(23, 59),
                capacity=capacity
            ))

    logger.debug(f"Built roster of {len(slots)} slots for {len(doctors)} doctors")
    return slots


def default_roster() -> List[TimeSlot]:
    """6 slots, capacities 4/4/3/3/2/2."""
    return build_roster(DEFAULT_DOCTORS, DEFAULT_HOURS)

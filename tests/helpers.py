from datetime import datetime, time, timedelta, timezone

from models import TimeSlot


class StepClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start=datetime(2025, 1, 15, 8, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


def make_slot(slot_id, capacity, start_hour=9, doctor_id="DrA"):
    return TimeSlot(
        id=slot_id,
        doctor_id=doctor_id,
        start=time(start_hour, 0),
        end=time(start_hour + 1, 0),
        capacity=capacity
    )


def patients(tokens):
    return [t.patient_id for t in tokens]

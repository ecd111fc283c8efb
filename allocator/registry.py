"""Slot Registry: the fixed catalog of time slots."""

from typing import Dict, Iterable, Iterator, List, Optional

from models import TimeSlot


class SlotRegistry:
    """
    Read-only catalog of slots, built once.
    Iteration keeps the order the caller supplied.
    """

    def __init__(self, slots: Iterable[TimeSlot]):
        self._slots: Dict[str, TimeSlot] = {}
        for slot in slots:
            if slot.id in self._slots:
                raise ValueError(f"Duplicate slot id: {slot.id}")
            self._slots[slot.id] = slot

        self._by_start: List[TimeSlot] = sorted(self._slots.values(), key=lambda s: (s.start, s.id))

    def get(self, slot_id: Optional[str]) -> Optional[TimeSlot]:
        """Return the slot, or None if the id is unknown."""
        if slot_id is None:
            return None
        return self._slots.get(slot_id)

    def list(self) -> List[TimeSlot]:
        return list(self._slots.values())

    def by_start_time(self) -> List[TimeSlot]:
        """Earliest first; ties broken by slot id."""
        return list(self._by_start)

    def __iter__(self) -> Iterator[TimeSlot]:
        return iter(list(self._slots.values()))

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, slot_id: object) -> bool:
        return slot_id in self._slots

from datetime import datetime, time, timezone

import pytest

from allocator.clock import MonotonicClock
from generators import build_roster, default_roster, slot_id_for


def test_clock_never_repeats_or_goes_backwards():
    frozen = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
    later = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
    readings = iter([frozen, frozen, frozen, later])
    clock = MonotonicClock(source=lambda: next(readings))

    stamps = [clock() for _ in range(4)]
    assert stamps == sorted(stamps)
    assert len(set(stamps)) == 4
    assert stamps[-1] == later


def test_default_clock_is_timezone_aware():
    assert MonotonicClock()().tzinfo is not None


def test_default_roster_layout():
    slots = default_roster()
    assert [s.id for s in slots] == ["drA-09", "drA-10", "drB-09", "drB-10", "drC-09", "drC-10"]
    assert [s.capacity for s in slots] == [4, 4, 3, 3, 2, 2]
    assert slots[0].start == time(9, 0)
    assert slots[0].end == time(10, 0)


def test_build_roster_with_short_slots():
    slots = build_roster({"DrX": 1}, [14], slot_minutes=30)
    assert slots[0].id == slot_id_for("DrX", 14) == "drX-14"
    assert slots[0].end == time(14, 30)


def test_build_roster_rejects_bad_length():
    with pytest.raises(ValueError):
        build_roster({"DrX": 1}, [9], slot_minutes=90)

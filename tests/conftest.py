import pytest

from allocator import TokenAllocationEngine
from generators import default_roster

from .helpers import StepClock


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def engine(clock):
    """Engine over the default 3-doctor, 2-hour roster."""
    return TokenAllocationEngine(default_roster(), clock=clock)

"""Strictly increasing timestamps for request tie-breaking."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

_TICK = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MonotonicClock:
    """
    Wall clock that never repeats or goes backwards.
    Two submissions in the same microsecond still get distinct, ordered timestamps.
    """

    def __init__(self, source: Optional[Callable[[], datetime]] = None):
        self._source = source or _utcnow
        self._last: Optional[datetime] = None

    def __call__(self) -> datetime:
        now = self._source()
        if self._last is not None and now <= self._last:
            now = self._last + _TICK
        self._last = now
        return now

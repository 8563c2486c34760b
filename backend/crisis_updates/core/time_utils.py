import threading
import time
from datetime import datetime
from typing import Callable, Optional

import pytz

UTC = pytz.utc

NANOS_PER_SECOND = 1_000_000_000


def from_timestamp_ns(ts: int) -> datetime:
    """Convert a nanosecond epoch timestamp to an aware UTC datetime."""
    seconds, nanos = divmod(ts, NANOS_PER_SECOND)
    return datetime.fromtimestamp(seconds, UTC).replace(microsecond=nanos // 1000)


def format_utc(ts: Optional[int]) -> Optional[str]:
    """Format a nanosecond timestamp as an ISO string in UTC."""
    if ts is None:
        return None
    return from_timestamp_ns(ts).isoformat()


class MonotonicClock:
    """
    Nanosecond wall clock that never goes backwards.

    If the underlying source steps back (NTP adjustment, manual change) the
    last issued value is returned again, so stamped records keep
    non-decreasing timestamps.
    """

    def __init__(self, source: Callable[[], int] = time.time_ns):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = self._source()
            if now > self._last:
                self._last = now
            return self._last

    def advance_to(self, floor: int) -> None:
        """Never issue a value below `floor` again."""
        with self._lock:
            if floor > self._last:
                self._last = floor

    @property
    def last(self) -> int:
        return self._last

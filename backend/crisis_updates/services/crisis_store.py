"""
Crisis Update Store - in-memory authority for crisis update records.

Holds:
- _next_id: the id the next add() will issue (starts at 1, never reused)
- _records: id -> CrisisUpdate, the primary map
- _by_location: location -> ids, kept in step with _records

Every public method takes the same lock, so concurrent request handlers
always observe a fully applied write. Records are copied on the way in and
out; callers never hold a reference into the store.
"""

import bisect
import threading
from typing import Callable, Dict, Iterable, List, Optional, Set

from crisis_updates.core.exceptions import NotFound
from crisis_updates.core.time_utils import MonotonicClock
from crisis_updates.schemas.crisis_update import (
    CrisisUpdate,
    CrisisUpdatePayload,
    StoreSnapshot,
)


class CrisisUpdateStore:
    """
    Single-process record store for crisis updates.
    """

    FIRST_ID = 1

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or MonotonicClock()
        self._lock = threading.RLock()
        self._next_id = self.FIRST_ID
        self._records: Dict[int, CrisisUpdate] = {}
        # Ascending list of live ids, so ordered reads need no sort
        self._ids: List[int] = []
        self._by_location: Dict[str, Set[int]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, id: object) -> bool:
        with self._lock:
            return id in self._records

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def add(self, payload: CrisisUpdatePayload) -> CrisisUpdate:
        with self._lock:
            record = CrisisUpdate(
                id=self._next_id,
                title=payload.title,
                description=payload.description,
                location=payload.location,
                timestamp=self._now(),
            )
            self._next_id += 1
            self._records[record.id] = record
            # New ids are always the largest, append keeps _ids sorted
            self._ids.append(record.id)
            self._index(record)
            return record.model_copy()

    def update(self, id: int, payload: CrisisUpdatePayload) -> CrisisUpdate:
        with self._lock:
            current = self._records.get(id)
            if current is None:
                raise NotFound(
                    f"couldn't update a crisis update with id={id}. update not found"
                )
            updated = current.model_copy(
                update={
                    "title": payload.title,
                    "description": payload.description,
                    "location": payload.location,
                    "timestamp": max(self._now(), current.timestamp),
                }
            )
            self._unindex(current)
            self._records[id] = updated
            self._index(updated)
            return updated.model_copy()

    def delete(self, id: int) -> CrisisUpdate:
        with self._lock:
            record = self._records.pop(id, None)
            if record is None:
                raise NotFound(
                    f"couldn't delete a crisis update with id={id}. update not found."
                )
            self._ids.pop(bisect.bisect_left(self._ids, id))
            self._unindex(record)
            return record

    def get(self, id: int) -> CrisisUpdate:
        with self._lock:
            record = self._records.get(id)
            if record is None:
                raise NotFound(f"a crisis update with id={id} not found")
            return record.model_copy()

    def get_latest(self) -> Optional[CrisisUpdate]:
        """Most recently created live record (highest id), or None."""
        with self._lock:
            if not self._ids:
                return None
            return self._records[self._ids[-1]].model_copy()

    def list_all(self) -> List[CrisisUpdate]:
        with self._lock:
            return self._copies(self._ids)

    def search_by_location(self, location: str) -> List[CrisisUpdate]:
        """Exact, case-sensitive match on location."""
        with self._lock:
            return self._copies(sorted(self._by_location.get(location, ())))

    def list_in_range(self, start_timestamp: int, end_timestamp: int) -> List[CrisisUpdate]:
        """Records with start_timestamp <= timestamp <= end_timestamp."""
        return self._filter(lambda r: start_timestamp <= r.timestamp <= end_timestamp)

    def list_before(self, end_timestamp: int) -> List[CrisisUpdate]:
        return self._filter(lambda r: r.timestamp < end_timestamp)

    def list_after(self, start_timestamp: int) -> List[CrisisUpdate]:
        return self._filter(lambda r: r.timestamp > start_timestamp)

    def list_by_id_range(self, start_id: int, end_id: int) -> List[CrisisUpdate]:
        """Records with start_id <= id <= end_id."""
        with self._lock:
            lo = bisect.bisect_left(self._ids, start_id)
            hi = bisect.bisect_right(self._ids, end_id)
            return self._copies(self._ids[lo:hi])

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(next_id=self._next_id, records=self._copies(self._ids))

    def restore(self, snapshot: StoreSnapshot) -> None:
        """
        Replace the store's contents with `snapshot`.
        The counter is raised past every restored id so none is issued twice.
        Raises ValueError if the snapshot holds the same id more than once.
        """
        records: Dict[int, CrisisUpdate] = {}
        for record in snapshot.records:
            if record.id in records:
                raise ValueError(f"snapshot contains crisis update id={record.id} more than once")
            records[record.id] = record.model_copy()
        next_id = max([snapshot.next_id, self.FIRST_ID] + [i + 1 for i in records])
        with self._lock:
            self._records = records
            self._ids = sorted(records)
            self._by_location = {}
            for record in records.values():
                self._index(record)
            self._next_id = next_id
            if records and isinstance(self._clock, MonotonicClock):
                self._clock.advance_to(max(r.timestamp for r in records.values()))

    def _now(self) -> int:
        return self._clock()

    def _index(self, record: CrisisUpdate) -> None:
        self._by_location.setdefault(record.location, set()).add(record.id)

    def _unindex(self, record: CrisisUpdate) -> None:
        ids = self._by_location.get(record.location)
        if ids is None:
            return
        ids.discard(record.id)
        if not ids:
            del self._by_location[record.location]

    def _copies(self, ids: Iterable[int]) -> List[CrisisUpdate]:
        return [self._records[i].model_copy() for i in ids]

    def _filter(self, predicate: Callable[[CrisisUpdate], bool]) -> List[CrisisUpdate]:
        with self._lock:
            return [
                self._records[i].model_copy()
                for i in self._ids
                if predicate(self._records[i])
            ]

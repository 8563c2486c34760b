"""
Crisis Update operations - the service's external interface.

One function per operation, each taking the owning store explicitly.
Lookups by id return a CrisisUpdateResult instead of raising, so the
calling transport decides how a missing record is presented.
"""

from typing import List, Optional

from crisis_updates.core.exceptions import NotFound
from crisis_updates.schemas.crisis_update import (
    CrisisUpdate,
    CrisisUpdatePayload,
    CrisisUpdateResult,
)
from crisis_updates.services.crisis_store import CrisisUpdateStore


def add_crisis_update(store: CrisisUpdateStore, payload: CrisisUpdatePayload) -> Optional[CrisisUpdate]:
    return store.add(payload)


def get_crisis_update(store: CrisisUpdateStore, id: int) -> CrisisUpdateResult:
    try:
        return CrisisUpdateResult.success(store.get(id))
    except NotFound as exc:
        return CrisisUpdateResult.not_found(exc)


def update_crisis_update(store: CrisisUpdateStore, id: int, payload: CrisisUpdatePayload) -> CrisisUpdateResult:
    try:
        return CrisisUpdateResult.success(store.update(id, payload))
    except NotFound as exc:
        return CrisisUpdateResult.not_found(exc)


def delete_crisis_update(store: CrisisUpdateStore, id: int) -> CrisisUpdateResult:
    try:
        return CrisisUpdateResult.success(store.delete(id))
    except NotFound as exc:
        return CrisisUpdateResult.not_found(exc)


def get_latest_crisis_update(store: CrisisUpdateStore) -> Optional[CrisisUpdate]:
    return store.get_latest()


def list_all_crisis_updates(store: CrisisUpdateStore) -> List[CrisisUpdate]:
    return store.list_all()


def search_crisis_updates_by_location(store: CrisisUpdateStore, location: str) -> List[CrisisUpdate]:
    return store.search_by_location(location)


def get_crisis_updates_in_range(store: CrisisUpdateStore, start_timestamp: int, end_timestamp: int) -> List[CrisisUpdate]:
    return store.list_in_range(start_timestamp, end_timestamp)


def get_crisis_updates_before(store: CrisisUpdateStore, end_timestamp: int) -> List[CrisisUpdate]:
    return store.list_before(end_timestamp)


def get_crisis_updates_after(store: CrisisUpdateStore, start_timestamp: int) -> List[CrisisUpdate]:
    return store.list_after(start_timestamp)


def get_crisis_updates_by_id_range(store: CrisisUpdateStore, start_id: int, end_id: int) -> List[CrisisUpdate]:
    return store.list_by_id_range(start_id, end_id)

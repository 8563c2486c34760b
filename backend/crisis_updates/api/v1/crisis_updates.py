from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
import structlog

from crisis_updates.api.deps import get_store
from crisis_updates.core.time_utils import format_utc
from crisis_updates.schemas.crisis_update import U64_MAX, CrisisUpdate, CrisisUpdatePayload
from crisis_updates.services import crisis_service
from crisis_updates.services.crisis_store import CrisisUpdateStore

router = APIRouter()
logger = structlog.get_logger()


def _check_bounds(start: int, end: int) -> None:
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"start ({start}) must not be greater than end ({end})",
        )


@router.post("/", response_model=CrisisUpdate, status_code=status.HTTP_201_CREATED)
def create_crisis_update(
    payload: CrisisUpdatePayload,
    store: CrisisUpdateStore = Depends(get_store),
):
    record = crisis_service.add_crisis_update(store, payload)
    logger.info("crisis_update_created", id=record.id, location=record.location, at=format_utc(record.timestamp))
    return record


@router.get("/", response_model=List[CrisisUpdate])
def list_crisis_updates(
    location: Optional[str] = Query(None, description="Exact, case-sensitive location match"),
    store: CrisisUpdateStore = Depends(get_store),
):
    """
    All live crisis updates in id order, or only those at `location`.
    """
    if location is not None:
        return crisis_service.search_crisis_updates_by_location(store, location)
    return crisis_service.list_all_crisis_updates(store)


@router.get("/latest", response_model=Optional[CrisisUpdate])
def get_latest_crisis_update(store: CrisisUpdateStore = Depends(get_store)):
    return crisis_service.get_latest_crisis_update(store)


@router.get("/range", response_model=List[CrisisUpdate])
def get_crisis_updates_in_range(
    start: int = Query(..., ge=0, le=U64_MAX),
    end: int = Query(..., ge=0, le=U64_MAX),
    store: CrisisUpdateStore = Depends(get_store),
):
    """
    Updates whose timestamp falls within [start, end], both inclusive.
    """
    _check_bounds(start, end)
    return crisis_service.get_crisis_updates_in_range(store, start, end)


@router.get("/before", response_model=List[CrisisUpdate])
def get_crisis_updates_before(
    end: int = Query(..., ge=0, le=U64_MAX),
    store: CrisisUpdateStore = Depends(get_store),
):
    return crisis_service.get_crisis_updates_before(store, end)


@router.get("/after", response_model=List[CrisisUpdate])
def get_crisis_updates_after(
    start: int = Query(..., ge=0, le=U64_MAX),
    store: CrisisUpdateStore = Depends(get_store),
):
    return crisis_service.get_crisis_updates_after(store, start)


@router.get("/by-id", response_model=List[CrisisUpdate])
def get_crisis_updates_by_id_range(
    start_id: int = Query(..., ge=0, le=U64_MAX),
    end_id: int = Query(..., ge=0, le=U64_MAX),
    store: CrisisUpdateStore = Depends(get_store),
):
    _check_bounds(start_id, end_id)
    return crisis_service.get_crisis_updates_by_id_range(store, start_id, end_id)


@router.get("/{id}", response_model=CrisisUpdate)
def get_crisis_update(
    id: int = Path(..., ge=0, le=U64_MAX),
    store: CrisisUpdateStore = Depends(get_store),
):
    # unwrap() raises NotFound, mapped to 404 by the app's handler
    return crisis_service.get_crisis_update(store, id).unwrap()


@router.put("/{id}", response_model=CrisisUpdate)
def update_crisis_update(
    payload: CrisisUpdatePayload,
    id: int = Path(..., ge=0, le=U64_MAX),
    store: CrisisUpdateStore = Depends(get_store),
):
    record = crisis_service.update_crisis_update(store, id, payload).unwrap()
    logger.info("crisis_update_updated", id=record.id, location=record.location, at=format_utc(record.timestamp))
    return record


@router.delete("/{id}", response_model=CrisisUpdate)
def delete_crisis_update(
    id: int = Path(..., ge=0, le=U64_MAX),
    store: CrisisUpdateStore = Depends(get_store),
):
    record = crisis_service.delete_crisis_update(store, id).unwrap()
    logger.info("crisis_update_deleted", id=record.id)
    return record

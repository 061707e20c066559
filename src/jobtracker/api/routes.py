from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, HTTPException

from jobtracker.api.deps import get_app_settings, get_store
from jobtracker.api.schemas import StatusUpdateRequest
from jobtracker.config import Settings
from jobtracker.store.base import InvalidInput, NotFound, RecordStore, StoreUnavailable
from jobtracker.types import STATUS_VALUES, Record

logger = logging.getLogger(__name__)


def _server_error(action: str, exc: StoreUnavailable) -> HTTPException:
    logger.error("%s failed: %s", action, exc)
    return HTTPException(status_code=500, detail="Server Error")


def validate_status_change(payload: StatusUpdateRequest | None, *, strict: bool) -> str:
    status = payload.status if payload else None
    if status is None or not status.strip():
        raise InvalidInput("Status is required")
    if strict and status not in STATUS_VALUES:
        raise InvalidInput(f"Status must be one of {', '.join(STATUS_VALUES)}")
    return status


def build_records_router(collection: str) -> APIRouter:
    router = APIRouter(prefix=f"/api/{collection}", tags=[collection])

    @router.get("", response_model=list[Record])
    def list_records(store: RecordStore = Depends(get_store)) -> list[Record]:
        try:
            return store.list_records()
        except StoreUnavailable as exc:
            raise _server_error(f"Listing {collection}", exc) from exc

    @router.get("/{record_id}", response_model=Record)
    def get_record(record_id: str, store: RecordStore = Depends(get_store)) -> Record:
        try:
            return store.get_record(record_id)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail="Application not found") from exc
        except StoreUnavailable as exc:
            raise _server_error(f"Loading {collection}/{record_id}", exc) from exc

    @router.put("/{record_id}", response_model=Record)
    def update_status(
        record_id: str,
        payload: StatusUpdateRequest | None = Body(default=None),
        store: RecordStore = Depends(get_store),
        settings: Settings = Depends(get_app_settings),
    ) -> Record:
        try:
            status = validate_status_change(payload, strict=settings.strict_status)
            return store.update_status(record_id, status)
        except InvalidInput as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except NotFound as exc:
            raise HTTPException(status_code=404, detail="Application not found") from exc
        except StoreUnavailable as exc:
            raise _server_error(f"Updating {collection}/{record_id}", exc) from exc

    return router

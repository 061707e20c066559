from __future__ import annotations

from typing import Protocol, runtime_checkable

from jobtracker.types import Record, RecordId


class StoreError(Exception):
    """Base class for record store failures."""


class StoreUnavailable(StoreError):
    """The backend could not be reached or the query failed."""


class NotFound(StoreError):
    def __init__(self, record_id: RecordId):
        super().__init__(f"record {record_id} not found")
        self.record_id = record_id


class InvalidInput(StoreError):
    pass


@runtime_checkable
class RecordStore(Protocol):
    backend: str

    def list_records(self) -> list[Record]: ...

    def get_record(self, record_id: RecordId) -> Record: ...

    def update_status(self, record_id: RecordId, status: str | None) -> Record: ...

    def close(self) -> None: ...


def require_status(status: str | None) -> str:
    if status is None or not str(status).strip():
        raise InvalidInput("status is required")
    return str(status)

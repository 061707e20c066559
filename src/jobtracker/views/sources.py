from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, Protocol, TypeVar
from urllib.parse import quote

import requests
from pydantic import ValidationError

from jobtracker.store.base import RecordStore, StoreError
from jobtracker.types import Provenance, Record, RecordId, same_record_id, sort_newest_first

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SourceError(Exception):
    """A data source could not produce the requested records."""


class RecordMissing(SourceError):
    pass


@dataclass(slots=True)
class Sourced(Generic[T]):
    value: T
    provenance: Provenance

    @property
    def is_live(self) -> bool:
        return self.provenance == "live"


class RecordSource(Protocol):
    def fetch_all(self) -> list[Record]: ...

    def fetch_one(self, record_id: RecordId) -> Record: ...


class LiveRecordSource(RecordSource, Protocol):
    def update_status(self, record_id: RecordId, status: str) -> Record: ...


def _parse_records(payload: Any) -> list[Record]:
    if not isinstance(payload, list):
        raise SourceError(f"expected a JSON array of records, got {type(payload).__name__}")
    try:
        return [Record.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise SourceError(f"malformed record: {exc}") from exc


class ApiSource:
    """Records served by a running tracker API, reached over HTTP."""

    def __init__(
        self,
        base_url: str,
        collection: str = "applications",
        *,
        session: Any | None = None,
        timeout_sec: float = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.collection = collection.strip("/")
        self.session = session or requests.Session()
        self.timeout_sec = timeout_sec

    def _url(self, record_id: RecordId | None = None) -> str:
        url = f"{self.base_url}/api/{self.collection}"
        return url if record_id is None else f"{url}/{quote(str(record_id), safe='')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self.session.request(method, url, timeout=self.timeout_sec, **kwargs)
        except requests.RequestException as exc:
            raise SourceError(f"{method} {url} failed: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise SourceError(f"{method} {url} returned HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise SourceError(f"{method} {url} returned invalid JSON") from exc

    def fetch_all(self) -> list[Record]:
        return _parse_records(self._request("GET", self._url()))

    def fetch_one(self, record_id: RecordId) -> Record:
        payload = self._request("GET", self._url(record_id))
        try:
            return Record.model_validate(payload)
        except ValidationError as exc:
            raise SourceError(f"malformed record {record_id}: {exc}") from exc

    def update_status(self, record_id: RecordId, status: str) -> Record:
        payload = self._request("PUT", self._url(record_id), json={"status": status})
        try:
            return Record.model_validate(payload)
        except ValidationError as exc:
            raise SourceError(f"malformed record {record_id}: {exc}") from exc


class StoreSource:
    """Records read straight from an open record store in this process."""

    def __init__(self, store: RecordStore):
        self.store = store

    def fetch_all(self) -> list[Record]:
        try:
            return self.store.list_records()
        except StoreError as exc:
            raise SourceError(str(exc)) from exc

    def fetch_one(self, record_id: RecordId) -> Record:
        try:
            return self.store.get_record(record_id)
        except StoreError as exc:
            raise SourceError(str(exc)) from exc

    def update_status(self, record_id: RecordId, status: str) -> Record:
        try:
            return self.store.update_status(record_id, status)
        except StoreError as exc:
            raise SourceError(str(exc)) from exc


class FallbackSource:
    """The bundled read-only snapshot, from a local file or a static URL."""

    def __init__(self, location: str | Path, *, session: Any | None = None, timeout_sec: float = 10):
        self.location = location
        self.session = session
        self.timeout_sec = timeout_sec

    def _load(self) -> Any:
        location = str(self.location)
        if location.startswith(("http://", "https://")):
            session = self.session or requests.Session()
            try:
                response = session.get(location, timeout=self.timeout_sec)
                response.raise_for_status()
                return response.json()
            except (requests.RequestException, ValueError) as exc:
                raise SourceError(f"fallback data at {location} unavailable: {exc}") from exc

        try:
            return json.loads(Path(location).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SourceError(f"fallback data at {location} unavailable: {exc}") from exc

    def fetch_all(self) -> list[Record]:
        return sort_newest_first(_parse_records(self._load()))

    def fetch_one(self, record_id: RecordId) -> Record:
        for record in self.fetch_all():
            if same_record_id(record.id, record_id):
                return record
        raise RecordMissing(f"record {record_id} not in fallback data")


class TieredSource:
    """Primary source first, fallback snapshot second, tagged with provenance.

    Any primary failure is treated the same way, whatever its cause. A
    fallback failure propagates to the caller as ``SourceError``.
    """

    def __init__(self, primary: LiveRecordSource, fallback: RecordSource):
        self.primary = primary
        self.fallback = fallback

    def load_all(self) -> Sourced[list[Record]]:
        try:
            return Sourced(self.primary.fetch_all(), "live")
        except SourceError as exc:
            logger.warning("Error fetching data from server: %s", exc)

        logger.info("Loading from local fallback data")
        return Sourced(self.fallback.fetch_all(), "fallback")

    def load_one(self, record_id: RecordId) -> Sourced[Record]:
        try:
            return Sourced(self.primary.fetch_one(record_id), "live")
        except SourceError as exc:
            logger.warning("Error fetching record %s from server: %s", record_id, exc)

        logger.info("Loading record %s from local fallback data", record_id)
        return Sourced(self.fallback.fetch_one(record_id), "fallback")

from __future__ import annotations

import logging
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions
from pydantic import ValidationError

from jobtracker.config import Settings
from jobtracker.store.base import NotFound, StoreUnavailable, require_status
from jobtracker.types import Record, RecordId

logger = logging.getLogger(__name__)

_APP_NAME = "jobtracker"


def snapshot_to_record(snapshot: Any) -> Record:
    data = dict(snapshot.to_dict() or {})
    data["id"] = snapshot.id
    try:
        return Record.model_validate(data)
    except ValidationError as exc:
        raise StoreUnavailable(f"document {snapshot.id} is malformed: {exc}") from exc


class FirestoreRecordStore:
    """Applications kept as documents in one Firestore collection.

    The document key is the record id. Status updates are a native update of
    the single ``status`` field, which fails when the document is missing.
    """

    backend = "firestore"

    def __init__(self, client: Any, collection: str, *, app: firebase_admin.App | None = None):
        self.client = client
        self.collection_name = collection
        self.app = app

    @property
    def collection(self) -> Any:
        return self.client.collection(self.collection_name)

    def _document(self, record_id: RecordId) -> Any:
        key = str(record_id).strip()
        if not key or "/" in key:
            raise NotFound(record_id)
        return self.collection.document(key)

    def list_records(self) -> list[Record]:
        query = self.collection.order_by("date", direction=firestore.Query.DESCENDING)
        try:
            snapshots = list(query.stream())
        except google_exceptions.GoogleAPIError as exc:
            raise StoreUnavailable(f"listing {self.collection_name} failed: {exc}") from exc
        return [snapshot_to_record(snapshot) for snapshot in snapshots]

    def get_record(self, record_id: RecordId) -> Record:
        reference = self._document(record_id)
        try:
            snapshot = reference.get()
        except google_exceptions.GoogleAPIError as exc:
            raise StoreUnavailable(f"loading document {record_id} failed: {exc}") from exc
        if not snapshot.exists:
            raise NotFound(record_id)
        return snapshot_to_record(snapshot)

    def update_status(self, record_id: RecordId, status: str | None) -> Record:
        status = require_status(status)
        reference = self._document(record_id)
        try:
            reference.update({"status": status})
            snapshot = reference.get()
        except google_exceptions.NotFound as exc:
            raise NotFound(record_id) from exc
        except google_exceptions.GoogleAPIError as exc:
            raise StoreUnavailable(f"updating document {record_id} failed: {exc}") from exc

        logger.info("Document %s status set to %r", reference.id, status)
        return snapshot_to_record(snapshot)

    def close(self) -> None:
        close_client = getattr(self.client, "close", None)
        if callable(close_client):
            close_client()
        if self.app is not None:
            firebase_admin.delete_app(self.app)
            self.app = None


def open_firestore_store(settings: Settings) -> FirestoreRecordStore:
    options = {"projectId": settings.firestore_project} if settings.firestore_project else None
    try:
        app = firebase_admin.initialize_app(credentials.ApplicationDefault(), options, name=_APP_NAME)
    except ValueError:
        app = firebase_admin.get_app(_APP_NAME)
    logger.info(
        "Firestore store using collection %r (project=%s)",
        settings.firestore_collection,
        settings.firestore_project or "application default",
    )
    return FirestoreRecordStore(firestore.client(app), settings.firestore_collection, app=app)

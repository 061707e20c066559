from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from google.api_core import exceptions as google_exceptions

from jobtracker.api.app import create_app
from jobtracker.config import Settings
from jobtracker.db.init import init_database
from jobtracker.db.seed import seed_applications
from jobtracker.db.session import build_engine, build_sessionmaker
from jobtracker.store.base import StoreUnavailable
from jobtracker.store.sql import SqlRecordStore
from jobtracker.types import Record

LIVE_RECORDS = [
    {
        "id": 1,
        "company": "Acme",
        "job-title": "Backend Engineer",
        "date": "2024-01-10",
        "status": "Submitted",
        "color": "#1f6feb",
        "greeting": "<p>Dear Acme team,</p>",
        "body": "<p>I would like to join Acme.</p>",
        "salutation": "<p>Sincerely,<br>Jordan</p>",
    },
    {
        "id": 2,
        "company": "Northwind",
        "job-title": "Data Engineer",
        "date": "2024-03-02",
        "status": "In Progress",
    },
    {
        "id": 3,
        "company": "Globex",
        "job-title": "Platform Engineer",
        "date": "2023-11-20",
        "status": "Corresponding",
    },
]

FALLBACK_RECORDS = [
    {
        "id": "7",
        "company": "Initech",
        "job-title": "Support Engineer",
        "date": "2023-05-01",
        "status": "Submitted",
        "color": "teal",
        "greeting": "<p>Dear Initech,</p>",
        "body": "<p>Saved letter body.</p>",
        "salutation": "<p>Regards,<br>Jordan</p>",
    },
    {
        "id": "8",
        "company": "Umbrella",
        "job-title": "QA Engineer",
        "date": "2023-09-14",
        "status": "Interviewing",
    },
]


class FailingStore:
    backend = "sql"

    def __init__(self) -> None:
        self.closed = False

    def list_records(self) -> list[Record]:
        raise StoreUnavailable("connection refused")

    def get_record(self, record_id):
        raise StoreUnavailable("connection refused")

    def update_status(self, record_id, status):
        raise StoreUnavailable("connection refused")

    def close(self) -> None:
        self.closed = True


class FakeSnapshot:
    def __init__(self, key: str, data: dict | None):
        self.id = key
        self._data = data
        self.exists = data is not None

    def to_dict(self) -> dict | None:
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, collection: "FakeCollection", key: str):
        self.collection = collection
        self.id = key

    def get(self) -> FakeSnapshot:
        self.collection.client.check()
        return FakeSnapshot(self.id, self.collection.docs.get(self.id))

    def update(self, data: dict) -> None:
        self.collection.client.check()
        if self.id not in self.collection.docs:
            raise google_exceptions.NotFound(f"No document to update: {self.id}")
        self.collection.docs[self.id].update(data)


class FakeQuery:
    def __init__(self, collection: "FakeCollection", field: str, direction: str):
        self.collection = collection
        self.field = field
        self.direction = direction

    def stream(self):
        self.collection.client.check()
        items = sorted(
            self.collection.docs.items(),
            key=lambda item: item[1][self.field],
            reverse=self.direction == "DESCENDING",
        )
        for key, data in items:
            yield FakeSnapshot(key, data)


class FakeCollection:
    def __init__(self, client: "FakeFirestoreClient"):
        self.client = client
        self.docs: dict[str, dict] = {}

    def document(self, key: str) -> FakeDocument:
        return FakeDocument(self, key)

    def order_by(self, field: str, direction: str = "ASCENDING") -> FakeQuery:
        return FakeQuery(self, field, direction)


class FakeFirestoreClient:
    """In-memory stand-in for the handful of Firestore client calls the store makes."""

    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}
        self.available = True
        self.closed = False

    def check(self) -> None:
        if not self.available:
            raise google_exceptions.ServiceUnavailable("firestore unreachable")

    def collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(self))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fallback_path(tmp_path: Path) -> Path:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(FALLBACK_RECORDS), encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path: Path, fallback_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        app_env="test",
        store_backend="sql",
        database_url=f"sqlite:///{tmp_path / 'tracker.db'}",
        fallback_data_path=fallback_path,
        strict_status=True,
    )


@pytest.fixture
def engine(settings: Settings):
    engine = build_engine(settings)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(engine) -> SqlRecordStore:
    with build_sessionmaker(engine)() as session:
        seed_applications(session, [Record.model_validate(item) for item in LIVE_RECORDS], keep_ids=True)
    return SqlRecordStore(engine)


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def firestore_client() -> FakeFirestoreClient:
    client = FakeFirestoreClient()
    collection = client.collection("jobs")
    for item in LIVE_RECORDS:
        data = {key: value for key, value in item.items() if key != "id"}
        collection.docs[f"doc-{item['id']}"] = data
    return client


@pytest.fixture
def client(settings: Settings, sql_store: SqlRecordStore):
    with TestClient(create_app(settings, store=sql_store)) as test_client:
        yield test_client


@pytest.fixture
def degraded_client(settings: Settings, failing_store: FailingStore):
    with TestClient(create_app(settings, store=failing_store)) as test_client:
        yield test_client

from __future__ import annotations

import logging

from sqlalchemy import Engine, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from jobtracker.db.models import Application
from jobtracker.db.session import build_sessionmaker
from jobtracker.store.base import NotFound, StoreUnavailable, require_status
from jobtracker.types import Record, RecordId

logger = logging.getLogger(__name__)

# Range of the INTEGER primary key on every supported database.
ROW_ID_MIN = -(2**31)
ROW_ID_MAX = 2**31 - 1


def parse_row_id(record_id: RecordId) -> int:
    if isinstance(record_id, bool):
        raise NotFound(record_id)
    try:
        value = int(str(record_id).strip())
    except ValueError as exc:
        raise NotFound(record_id) from exc
    if not ROW_ID_MIN <= value <= ROW_ID_MAX:
        raise NotFound(record_id)
    return value


class SqlRecordStore:
    """Applications kept in one relational table, keyed by an integer id."""

    backend = "sql"

    def __init__(self, engine: Engine, session_factory: sessionmaker[Session] | None = None):
        self.engine = engine
        self.session_factory = session_factory or build_sessionmaker(engine)

    def list_records(self) -> list[Record]:
        statement = select(Application).order_by(Application.date.desc())
        try:
            with self.session_factory() as session:
                return [row.to_record() for row in session.scalars(statement).all()]
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"listing applications failed: {exc}") from exc

    def get_record(self, record_id: RecordId) -> Record:
        row_id = parse_row_id(record_id)
        try:
            with self.session_factory() as session:
                row = session.get(Application, row_id)
                if row is None:
                    raise NotFound(record_id)
                return row.to_record()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"loading application {record_id} failed: {exc}") from exc

    def update_status(self, record_id: RecordId, status: str | None) -> Record:
        status = require_status(status)
        row_id = parse_row_id(record_id)
        statement = (
            update(Application)
            .where(Application.id == row_id)
            .values(status=status)
            .returning(Application)
        )
        try:
            with self.session_factory() as session:
                row = session.scalars(statement).one_or_none()
                if row is None:
                    session.rollback()
                    raise NotFound(record_id)
                record = row.to_record()
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"updating application {record_id} failed: {exc}") from exc

        logger.info("Application %s status set to %r", row_id, status)
        return record

    def close(self) -> None:
        self.engine.dispose()

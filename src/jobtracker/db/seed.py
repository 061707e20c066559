from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from jobtracker.db.models import Application
from jobtracker.types import Record

logger = logging.getLogger(__name__)


def load_records_file(path: Path) -> list[Record]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a JSON array of records")
    return [Record.model_validate(item) for item in payload]


def _row_values(record: Record, *, keep_id: bool) -> dict[str, Any]:
    values = record.model_dump(exclude={"id"})
    if keep_id:
        try:
            values["id"] = int(record.id)
        except (TypeError, ValueError):
            pass
    return values


def seed_applications(session: Session, records: list[Record], *, keep_ids: bool = False) -> int:
    """Insert records created outside the API. Returns the number of rows added."""
    inserted = 0
    for record in records:
        values = _row_values(record, keep_id=keep_ids)
        if "id" in values and session.get(Application, values["id"]) is not None:
            logger.info("Skipping existing application %s", values["id"])
            continue
        session.add(Application(**values))
        inserted += 1

    session.commit()
    return inserted

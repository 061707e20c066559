from __future__ import annotations

import logging

from jobtracker.config import Settings
from jobtracker.db.init import init_database
from jobtracker.db.session import build_engine
from jobtracker.store.base import RecordStore
from jobtracker.store.sql import SqlRecordStore

logger = logging.getLogger(__name__)


def open_store(settings: Settings, *, create_schema: bool = False) -> RecordStore:
    """Build the one record store this deployment is configured for."""
    if settings.store_backend == "firestore":
        from jobtracker.store.firestore import open_firestore_store

        return open_firestore_store(settings)

    engine = build_engine(settings)
    logger.info("SQL store using %s", engine.url.render_as_string(hide_password=True))
    if create_schema:
        init_database(engine)
    return SqlRecordStore(engine)

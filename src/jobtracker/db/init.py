from __future__ import annotations

from sqlalchemy import Engine

from jobtracker.db.base import Base
from jobtracker.db import models  # noqa: F401


def init_database(engine: Engine) -> dict[str, list[str]]:
    Base.metadata.create_all(bind=engine)
    return {"tables": sorted(Base.metadata.tables)}

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from jobtracker.types import Provenance, Record, RecordId
from jobtracker.views.list_view import format_long_date
from jobtracker.views.rendering import render_template
from jobtracker.views.sources import SourceError, TieredSource

logger = logging.getLogger(__name__)

LETTER_ERROR_MESSAGE = "Error: Application data could not be loaded."
DEFAULT_ACCENT_COLOR = "#333333"


@dataclass(slots=True)
class Letter:
    record_id: RecordId | None
    record: Record | None = None
    provenance: Provenance | None = None
    issued_on: date = field(default_factory=date.today)

    @property
    def loaded(self) -> bool:
        return self.record is not None

    @property
    def error(self) -> str:
        return "" if self.loaded else LETTER_ERROR_MESSAGE

    @property
    def color(self) -> str:
        if self.record is not None and self.record.color.strip():
            return self.record.color.strip()
        return DEFAULT_ACCENT_COLOR

    @property
    def display_date(self) -> str:
        return format_long_date(self.issued_on)


class LetterView:
    def __init__(self, source: TieredSource):
        self.source = source

    def load(self, record_id: RecordId | None) -> Letter:
        if record_id is None or not str(record_id).strip():
            return Letter(record_id=None)
        try:
            sourced = self.source.load_one(record_id)
        except SourceError as exc:
            logger.error("No matching data found in fallback file for %s: %s", record_id, exc)
            return Letter(record_id=record_id)
        return Letter(record_id=record_id, record=sourced.value, provenance=sourced.provenance)

    @staticmethod
    def render(letter: Letter) -> str:
        return render_template("cover_letter.html", letter=letter)

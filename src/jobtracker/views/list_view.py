from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from urllib.parse import urlencode

from jobtracker.types import STATUS_VALUES, Provenance, Record, RecordId, same_record_id
from jobtracker.views.rendering import render_template
from jobtracker.views.sources import SourceError, TieredSource

logger = logging.getLogger(__name__)


class ViewState(StrEnum):
    LOADING = "loading"
    LIVE = "live"
    DEGRADED = "degraded"
    FAILED = "failed"


class RowState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class ReadOnlyViewError(RuntimeError):
    pass


def format_long_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def letter_href(record_id: RecordId) -> str:
    return f"/cover-letter?{urlencode({'id': str(record_id)})}"


@dataclass(slots=True)
class Row:
    record: Record
    editable: bool
    state: RowState = RowState.IDLE
    error: str = ""

    @property
    def display_date(self) -> str:
        return format_long_date(self.record.date)

    @property
    def letter_href(self) -> str:
        return letter_href(self.record.id)


@dataclass
class ListView:
    source: TieredSource
    state: ViewState = ViewState.LOADING
    rows: list[Row] = field(default_factory=list)
    provenance: Provenance | None = None

    @property
    def is_editable(self) -> bool:
        return self.state == ViewState.LIVE

    def load(self) -> ViewState:
        self.state = ViewState.LOADING
        self.rows = []
        self.provenance = None
        try:
            sourced = self.source.load_all()
        except SourceError as exc:
            logger.error("Error loading fallback data: %s", exc)
            self.state = ViewState.FAILED
            return self.state

        self.provenance = sourced.provenance
        self.state = ViewState.LIVE if sourced.is_live else ViewState.DEGRADED
        self.rows = [Row(record=record, editable=sourced.is_live) for record in sourced.value]
        return self.state

    def find_row(self, record_id: RecordId) -> Row:
        for row in self.rows:
            if same_record_id(row.record.id, record_id):
                return row
        raise KeyError(f"no row for record {record_id}")

    def change_status(self, record_id: RecordId, status: str) -> Row:
        """Send one status update for a row and record how it ended.

        The row is pending while the call runs, then confirmed with the record
        the backend returned, or failed with the previous status still shown.
        """
        if not self.is_editable:
            raise ReadOnlyViewError(f"status changes are disabled while the view is {self.state}")

        row = self.find_row(record_id)
        row.state = RowState.PENDING
        row.error = ""
        try:
            updated = self.source.primary.update_status(row.record.id, status)
        except SourceError as exc:
            logger.error("Error updating status of %s: %s", record_id, exc)
            row.state = RowState.FAILED
            row.error = f"Could not save status {status!r}"
            return row

        logger.info("Status updated successfully for %s", record_id)
        row.record = updated
        row.state = RowState.CONFIRMED
        return row

    def render(self) -> str:
        return render_template(
            "applications.html",
            view=self,
            rows=self.rows,
            statuses=STATUS_VALUES,
            degraded=self.state == ViewState.DEGRADED,
            failed=self.state == ViewState.FAILED,
        )

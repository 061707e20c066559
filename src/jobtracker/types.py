from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ApplicationStatus = Literal["In Progress", "Submitted", "Corresponding", "Interviewing"]
STATUS_VALUES: tuple[str, ...] = ("In Progress", "Submitted", "Corresponding", "Interviewing")

Provenance = Literal["live", "fallback"]
RecordId = int | str


class Record(BaseModel):
    """One application (or job posting) as every backend reports it."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str
    company: str = ""
    job_title: str = Field(default="", alias="job-title")
    date: Date
    status: str = ""
    color: str = ""
    greeting: str = ""
    body: str = ""
    salutation: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator("company", "job_title", "status", "color", "greeting", "body", "salutation", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def same_record_id(left: RecordId, right: RecordId) -> bool:
    return str(left).strip() == str(right).strip()


def sort_newest_first(records: list[Record]) -> list[Record]:
    return sorted(records, key=lambda record: record.date, reverse=True)

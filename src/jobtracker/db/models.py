from __future__ import annotations

import datetime as dt

from sqlalchemy import Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobtracker.db.base import Base, TimestampMixin
from jobtracker.types import Record


class Application(TimestampMixin, Base):
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    job_title: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(80), default="In Progress", nullable=False)
    color: Mapped[str] = mapped_column(String(40), default="", nullable=False)
    greeting: Mapped[str] = mapped_column(Text, default="", nullable=False)
    body: Mapped[str] = mapped_column(Text, default="", nullable=False)
    salutation: Mapped[str] = mapped_column(Text, default="", nullable=False)

    def to_record(self) -> Record:
        return Record(
            id=self.id,
            company=self.company,
            job_title=self.job_title,
            date=self.date,
            status=self.status,
            color=self.color,
            greeting=self.greeting,
            body=self.body,
            salutation=self.salutation,
        )

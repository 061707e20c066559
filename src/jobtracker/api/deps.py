from __future__ import annotations

from fastapi import Request

from jobtracker.config import Settings
from jobtracker.store.base import RecordStore


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings

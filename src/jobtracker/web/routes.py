from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import FileResponse, HTMLResponse, Response

from jobtracker.api.deps import get_app_settings, get_store
from jobtracker.api.routes import validate_status_change
from jobtracker.api.schemas import StatusUpdateRequest
from jobtracker.config import Settings
from jobtracker.store.base import InvalidInput, RecordStore
from jobtracker.views.export import export_letter_pdf
from jobtracker.views.letter_view import LetterView
from jobtracker.views.list_view import ListView, ReadOnlyViewError
from jobtracker.views.sources import FallbackSource, StoreSource, TieredSource

router = APIRouter(tags=["web"])
static_dir = Path(__file__).resolve().parent / "static"


def get_tiered_source(
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> TieredSource:
    return TieredSource(StoreSource(store), FallbackSource(settings.fallback_data_path))


def _icon_response(*filenames: str) -> Response:
    for filename in filenames:
        icon_path = static_dir / filename
        if icon_path.is_file():
            return FileResponse(icon_path)
    return Response(status_code=204)


@router.get("/favicon.ico", include_in_schema=False)
def favicon() -> Response:
    return _icon_response("favicon.ico", "favicon.png", "favicon.svg")


@router.get("/data.json", include_in_schema=False)
def fallback_data(settings: Settings = Depends(get_app_settings)) -> Response:
    if not Path(settings.fallback_data_path).is_file():
        return Response(status_code=404)
    return FileResponse(settings.fallback_data_path, media_type="application/json")


@router.get("/", response_class=HTMLResponse)
def applications_page(source: TieredSource = Depends(get_tiered_source)) -> HTMLResponse:
    view = ListView(source)
    view.load()
    return HTMLResponse(view.render())


@router.post("/web/applications/{record_id}/status", response_class=HTMLResponse)
def change_status(
    record_id: str,
    status: str = Form(...),
    source: TieredSource = Depends(get_tiered_source),
    settings: Settings = Depends(get_app_settings),
) -> HTMLResponse:
    view = ListView(source)
    view.load()
    try:
        status = validate_status_change(StatusUpdateRequest(status=status), strict=settings.strict_status)
    except InvalidInput:
        return HTMLResponse(view.render(), status_code=400)
    try:
        view.change_status(record_id, status)
    except ReadOnlyViewError:
        return HTMLResponse(view.render(), status_code=409)
    except KeyError:
        return HTMLResponse(view.render(), status_code=404)
    return HTMLResponse(view.render())


@router.get("/cover-letter", response_class=HTMLResponse)
@router.get("/cover-letter.html", response_class=HTMLResponse, include_in_schema=False)
def cover_letter_page(id: str | None = None, source: TieredSource = Depends(get_tiered_source)) -> HTMLResponse:
    view = LetterView(source)
    return HTMLResponse(view.render(view.load(id)))


@router.get("/cover-letter.pdf")
def cover_letter_pdf(id: str | None = None, source: TieredSource = Depends(get_tiered_source)) -> Response:
    letter = LetterView(source).load(id)
    return Response(
        content=export_letter_pdf(letter),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="cover-letter.pdf"'},
    )


@router.get("/{path:path}", response_class=HTMLResponse, include_in_schema=False)
def application_shell(path: str, source: TieredSource = Depends(get_tiered_source)) -> HTMLResponse:
    return applications_page(source)

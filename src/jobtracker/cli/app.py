from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn

from jobtracker.api.app import create_app
from jobtracker.config import get_settings
from jobtracker.db.init import init_database
from jobtracker.db.seed import load_records_file, seed_applications
from jobtracker.db.session import build_engine, build_sessionmaker
from jobtracker.logging_config import configure_logging
from jobtracker.views.export import export_letter_pdf
from jobtracker.views.letter_view import LetterView
from jobtracker.views.list_view import ListView, ViewState
from jobtracker.views.sources import ApiSource, FallbackSource, SourceError, TieredSource

app = typer.Typer(help="Job application tracker CLI")


def _tiered_source(api_url: str | None, collection: str, fallback: Path | None) -> TieredSource:
    settings = get_settings()
    primary = ApiSource(api_url or settings.api_base_url, collection, timeout_sec=settings.api_timeout_sec)
    return TieredSource(primary, FallbackSource(fallback or settings.fallback_data_path))


def _require_sql_backend() -> None:
    if get_settings().store_backend != "sql":
        typer.echo("This command only applies to the sql store backend.", err=True)
        raise typer.Exit(code=2)


@app.command("init")
def init_cmd() -> None:
    """Create the applications table in the configured SQL database."""
    configure_logging()
    _require_sql_backend()
    engine = build_engine(get_settings())
    try:
        result = init_database(engine)
    finally:
        engine.dispose()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@app.command("import-records")
def import_records(
    file: Path = typer.Option(..., "--file", exists=True, readable=True),
    keep_ids: bool = typer.Option(False, "--keep-ids", help="Reuse numeric ids from the file"),
) -> None:
    """Add records to the SQL store outside the API."""
    configure_logging()
    _require_sql_backend()
    records = load_records_file(file)
    engine = build_engine(get_settings())
    try:
        init_database(engine)
        with build_sessionmaker(engine)() as session:
            inserted = seed_applications(session, records, keep_ids=keep_ids)
    finally:
        engine.dispose()
    typer.echo(json.dumps({"ok": True, "inserted": inserted}, indent=2))


@app.command("list")
def list_cmd(
    api_url: str | None = typer.Option(None, "--api-url"),
    collection: str = typer.Option("applications", "--collection"),
    fallback: Path | None = typer.Option(None, "--fallback"),
    html_out: Path | None = typer.Option(None, "--html-out"),
) -> None:
    """Show applications from the API, or from the fallback data when it is down."""
    configure_logging()
    view = ListView(_tiered_source(api_url, collection, fallback))
    state = view.load()
    if html_out:
        html_out.write_text(view.render(), encoding="utf-8")

    typer.echo(
        json.dumps(
            {
                "state": str(state),
                "provenance": view.provenance,
                "records": [
                    {**row.record.to_payload(), "editable": row.editable}
                    for row in view.rows
                ],
            },
            indent=2,
        )
    )
    if state == ViewState.FAILED:
        raise typer.Exit(code=1)


@app.command("letter")
def letter_cmd(
    record_id: str = typer.Argument(...),
    api_url: str | None = typer.Option(None, "--api-url"),
    collection: str = typer.Option("jobs", "--collection"),
    fallback: Path | None = typer.Option(None, "--fallback"),
    html_out: Path | None = typer.Option(None, "--html-out"),
    pdf_out: Path | None = typer.Option(None, "--pdf-out"),
) -> None:
    """Render the cover letter for one application."""
    configure_logging()
    view = LetterView(_tiered_source(api_url, collection, fallback))
    letter = view.load(record_id)
    if html_out:
        html_out.write_text(view.render(letter), encoding="utf-8")
    if pdf_out:
        pdf_out.write_bytes(export_letter_pdf(letter))

    typer.echo(
        json.dumps(
            {"id": record_id, "loaded": letter.loaded, "provenance": letter.provenance, "error": letter.error},
            indent=2,
        )
    )
    if not letter.loaded:
        raise typer.Exit(code=1)


@app.command("set-status")
def set_status(
    record_id: str = typer.Argument(...),
    status: str = typer.Argument(...),
    api_url: str | None = typer.Option(None, "--api-url"),
    collection: str = typer.Option("applications", "--collection"),
) -> None:
    """Change the status of one application through the API."""
    configure_logging()
    settings = get_settings()
    source = ApiSource(api_url or settings.api_base_url, collection, timeout_sec=settings.api_timeout_sec)
    try:
        record = source.update_status(record_id, status)
    except SourceError as exc:
        typer.echo(f"Status update failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(record.to_payload(), indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    settings = get_settings()
    app_instance = create_app(settings)
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

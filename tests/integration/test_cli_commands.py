from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from jobtracker.cli import app as cli_module
from jobtracker.db.session import build_engine
from jobtracker.store.sql import SqlRecordStore

runner = CliRunner()
UNREACHABLE_API = "http://127.0.0.1:9"
RECORDS = [
    {"id": 1, "company": "Acme", "job-title": "Backend Engineer", "date": "2024-01-10", "status": "Submitted"},
    {"id": 2, "company": "Northwind", "job-title": "Data Engineer", "date": "2024-03-02", "status": "In Progress"},
]


@pytest.fixture(autouse=True)
def cli_settings(monkeypatch, settings):
    monkeypatch.setattr(cli_module, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_module, "configure_logging", lambda: None)
    return settings


def test_init_and_import_records(tmp_path, settings) -> None:
    result = runner.invoke(cli_module.app, ["init"])
    assert result.exit_code == 0, result.output
    assert "applications" in json.loads(result.stdout)["tables"]

    records_file = tmp_path / "records.json"
    records_file.write_text(json.dumps(RECORDS), encoding="utf-8")
    result = runner.invoke(cli_module.app, ["import-records", "--file", str(records_file), "--keep-ids"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["inserted"] == 2

    again = runner.invoke(cli_module.app, ["import-records", "--file", str(records_file), "--keep-ids"])
    assert json.loads(again.stdout)["inserted"] == 0

    store = SqlRecordStore(build_engine(settings))
    assert store.get_record(1).company == "Acme"
    store.close()


def test_list_falls_back_when_api_is_unreachable(tmp_path) -> None:
    html_out = tmp_path / "applications.html"
    result = runner.invoke(cli_module.app, ["list", "--api-url", UNREACHABLE_API, "--html-out", str(html_out)])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["state"] == "degraded"
    assert payload["provenance"] == "fallback"
    assert all(not item["editable"] for item in payload["records"])
    assert "Initech" in html_out.read_text(encoding="utf-8")


def test_letter_exports_pdf_from_fallback(tmp_path) -> None:
    pdf_out = tmp_path / "letter.pdf"
    result = runner.invoke(cli_module.app, ["letter", "7", "--api-url", UNREACHABLE_API, "--pdf-out", str(pdf_out)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["provenance"] == "fallback"
    assert pdf_out.read_bytes().startswith(b"%PDF")


def test_letter_for_unknown_id_exits_nonzero() -> None:
    result = runner.invoke(cli_module.app, ["letter", "999", "--api-url", UNREACHABLE_API])
    assert result.exit_code == 1


def test_set_status_reports_unreachable_api() -> None:
    result = runner.invoke(cli_module.app, ["set-status", "1", "Submitted", "--api-url", UNREACHABLE_API])
    assert result.exit_code == 1


def test_sql_only_commands_refuse_firestore(monkeypatch, settings) -> None:
    firestore_settings = settings.model_copy(update={"store_backend": "firestore"})
    monkeypatch.setattr(cli_module, "get_settings", lambda: firestore_settings)
    assert runner.invoke(cli_module.app, ["init"]).exit_code == 2

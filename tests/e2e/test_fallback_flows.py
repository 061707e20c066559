from __future__ import annotations

from jobtracker.views.letter_view import LETTER_ERROR_MESSAGE, LetterView
from jobtracker.views.list_view import ListView, RowState, ViewState
from jobtracker.views.sources import ApiSource, FallbackSource, TieredSource


def _tiered(test_client, fallback_path, collection: str = "applications") -> TieredSource:
    primary = ApiSource("http://testserver", collection, session=test_client)
    return TieredSource(primary, FallbackSource(fallback_path))


def test_live_api_list_then_status_change_round_trip(client, fallback_path) -> None:
    view = ListView(_tiered(client, fallback_path))
    assert view.load() == ViewState.LIVE
    assert [row.record.id for row in view.rows] == [2, 1, 3]

    row = view.change_status(1, "Interviewing")
    assert row.state == RowState.CONFIRMED
    assert client.get("/api/applications/1").json()["status"] == "Interviewing"


def test_rejected_status_change_is_reported_on_the_row(client, fallback_path) -> None:
    view = ListView(_tiered(client, fallback_path))
    view.load()
    row = view.change_status(2, "Ghosted")
    assert row.state == RowState.FAILED
    assert row.record.status == "In Progress"
    assert client.get("/api/applications/2").json()["status"] == "In Progress"


def test_server_500_renders_fallback_rows_with_disabled_controls(degraded_client, fallback_path) -> None:
    assert degraded_client.get("/api/applications").status_code == 500

    view = ListView(_tiered(degraded_client, fallback_path))
    assert view.load() == ViewState.DEGRADED
    assert {row.record.company for row in view.rows} == {"Initech", "Umbrella"}

    html = view.render()
    assert html.count("disabled") == len(view.rows)
    assert "<button" not in html


def test_letter_for_id_absent_everywhere_shows_only_error(client, fallback_path) -> None:
    view = LetterView(_tiered(client, fallback_path, "jobs"))
    letter = view.load("555")
    html = view.render(letter)
    assert LETTER_ERROR_MESSAGE in html
    assert 'id="greeting"></div>' in html
    assert 'id="salutation"></div>' in html


def test_letter_uses_live_record_when_api_is_up(client, fallback_path) -> None:
    letter = LetterView(_tiered(client, fallback_path, "jobs")).load("1")
    assert letter.provenance == "live"
    assert letter.record.company == "Acme"


def test_letter_falls_back_when_api_is_down(degraded_client, fallback_path) -> None:
    letter = LetterView(_tiered(degraded_client, fallback_path, "jobs")).load("8")
    assert letter.provenance == "fallback"
    assert letter.record.company == "Umbrella"

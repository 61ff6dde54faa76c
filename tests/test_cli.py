from __future__ import annotations

import json

import httpx
import pytest
import respx

from ical_feed import cli

URL = "https://calendar.example.com/team.ics"


@respx.mock
def test_cli_prints_events_as_host_json(capsys, single_events_ics):
    route = respx.get(URL).mock(return_value=httpx.Response(200, text=single_events_ics))

    code = cli.main(
        [
            URL,
            "--start",
            "2026-02-09T00:00:00Z",
            "--end",
            "2026-02-14T00:00:00Z",
            "--header",
            "Authorization: Bearer abc",
        ]
    )

    assert code == 0
    assert route.calls.last.request.headers["Authorization"] == "Bearer abc"
    events = json.loads(capsys.readouterr().out)
    by_id = {event["id"]: event for event in events}
    assert set(by_id) == {"tz-event-1", "open-ended-1", "duration-1"}
    assert by_id["tz-event-1"]["extendedProps"]["x-room-code"] == "R12-B"
    assert by_id["open-ended-1"]["end"] is None
    assert by_id["open-ended-1"]["allDay"] is False


@respx.mock
def test_cli_reports_fetch_failure(capsys):
    respx.get(URL).mock(return_value=httpx.Response(404))

    code = cli.main([URL, "--start", "2026-02-09", "--end", "2026-02-14"])

    assert code == 1
    assert "HTTP 404" in capsys.readouterr().err


def test_cli_rejects_empty_range(capsys):
    code = cli.main([URL, "--start", "2026-02-14", "--end", "2026-02-09"])
    assert code == 2
    assert "--end must be after --start" in capsys.readouterr().err


def test_cli_rejects_malformed_header():
    with pytest.raises(SystemExit):
        cli.main([URL, "--start", "2026-02-09", "--end", "2026-02-14", "--header", "nocolon"])

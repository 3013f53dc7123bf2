from __future__ import annotations

import json

from meeting_scheduler import cli
from meeting_scheduler.cli import build_parser, main, schedule_from_args
from meeting_scheduler.services.scheduling import MeetingSchedulingService


def test_schedule_command_prints_result(graph_client, fake_graph, capsys) -> None:
    args = build_parser().parse_args(
        [
            "schedule",
            "--subject",
            "Retro",
            "--start",
            "2030-02-01T10:00:00Z",
            "--end",
            "2030-02-01T11:00:00Z",
            "--attendee",
            "a@example.com",
            "--no-camera",
            "--record",
        ]
    )
    service = MeetingSchedulingService(client_factory=lambda _credentials: graph_client)

    assert schedule_from_args(args, service) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "success"
    assert output["execution_id"].startswith("exec_")
    assert output["timestamp"]
    assert "error_code" not in output
    assert output["data"]["attendees_count"] == 1
    assert output["data"]["instructions"][-1] == "Recording is enabled for this meeting."
    payload = fake_graph.meeting_payload()
    assert payload["allowAttendeeToEnableCamera"] is False
    assert payload["allowRecording"] is True


def test_schedule_command_reports_validation_error(graph_client, fake_graph, capsys) -> None:
    args = build_parser().parse_args(
        ["schedule", "--subject", "Retro", "--start", "2030-02-01T10:00:00Z", "--end", "2030-02-01T09:00:00Z"]
    )
    service = MeetingSchedulingService(client_factory=lambda _credentials: graph_client)

    assert schedule_from_args(args, service) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    error = json.loads(captured.err)
    assert error["status"] == "error"
    assert error["execution_id"].startswith("exec_")
    assert error["timestamp"]
    assert error["error_code"] == "VALIDATION_ERROR"
    assert error["error_message"] == "End time must be after start time"
    assert "data" not in error
    assert fake_graph.token_calls == []


def test_serve_command_runs_uvicorn(monkeypatch, reset_settings) -> None:
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert main(["serve", "--port", "9000"]) == 0

    assert calls == [("meeting_scheduler.main:app", {"host": "0.0.0.0", "port": 9000, "log_level": "info"})]


def test_serve_command_defaults_to_configured_port(monkeypatch, reset_settings) -> None:
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "8123")
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert main(["serve"]) == 0

    assert calls[0][1]["host"] == "127.0.0.1"
    assert calls[0][1]["port"] == 8123

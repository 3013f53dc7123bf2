from __future__ import annotations

import json
import os
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

os.environ["APP_ENV"] = "test"
os.environ["CLIENT_ID"] = "test-client"
os.environ["CLIENT_SECRET"] = "test-secret"
os.environ["TENANT_ID"] = "test-tenant"
os.environ.pop("USER_ID", None)
os.environ.pop("API_KEY_AUTH", None)

from meeting_scheduler.core.config import get_settings  # noqa: E402
from meeting_scheduler.api.endpoints.execute import get_scheduling_service  # noqa: E402
from meeting_scheduler.integrations.microsoft.auth import ProviderCredentials  # noqa: E402
from meeting_scheduler.integrations.microsoft.graph import GraphClient  # noqa: E402
from meeting_scheduler.main import create_app  # noqa: E402
from meeting_scheduler.services.scheduling import MeetingSchedulingService  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeGraph:
    """In-memory stand-in for the Microsoft identity platform and Graph API."""

    def __init__(self) -> None:
        self.token_calls: list[httpx.Request] = []
        self.meeting_calls: list[httpx.Request] = []
        self.token_status = 200
        self.token_body: dict | str = {"access_token": "token-1", "expires_in": 3600, "token_type": "Bearer"}
        self.meeting_status = 201
        self.meeting_body: dict | str | None = None
        self.meeting_error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/oauth2/v2.0/token"):
            self.token_calls.append(request)
            return _response(self.token_status, self.token_body)
        if request.url.path.endswith("/onlineMeetings"):
            self.meeting_calls.append(request)
            if self.meeting_error is not None:
                raise self.meeting_error
            body = self.meeting_body if self.meeting_body is not None else _echo_meeting(request)
            return _response(self.meeting_status, body)
        return httpx.Response(404, text="not found")

    def token_form(self, index: int = 0) -> dict[str, str]:
        form = parse_qs(self.token_calls[index].content.decode())
        return {key: values[0] for key, values in form.items()}

    def meeting_payload(self, index: int = 0) -> dict:
        return json.loads(self.meeting_calls[index].content)


def _response(status_code: int, body: dict | str) -> httpx.Response:
    if isinstance(body, str):
        return httpx.Response(status_code, text=body)
    return httpx.Response(status_code, json=body)


def _echo_meeting(request: httpx.Request) -> dict:
    payload = json.loads(request.content)
    return {
        "id": "meeting-123",
        "joinUrl": "https://teams.microsoft.com/l/meetup-join/abc",
        "subject": payload["subject"],
        "startDateTime": payload["startDateTime"],
        "endDateTime": payload["endDateTime"],
        "creationDateTime": "2026-01-01T00:00:00Z",
        "allowAttendeeToEnableCamera": payload["allowAttendeeToEnableCamera"],
        "allowAttendeeToEnableMic": payload["allowAttendeeToEnableMic"],
        "allowRecording": payload["allowRecording"],
        "allowMeetingChat": payload["allowMeetingChat"],
    }


@pytest.fixture()
def credentials() -> ProviderCredentials:
    return ProviderCredentials(client_id="test-client", client_secret="test-secret", tenant_id="test-tenant")


@pytest.fixture()
def fake_graph() -> FakeGraph:
    return FakeGraph()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def graph_client(credentials, fake_graph, clock) -> Generator[GraphClient, None, None]:
    http_client = httpx.Client(transport=httpx.MockTransport(fake_graph.handler))
    client = GraphClient(credentials, http_client=http_client, clock=clock)
    try:
        yield client
    finally:
        http_client.close()


@pytest.fixture()
def client(graph_client) -> Generator[TestClient, None, None]:
    app = create_app()
    service = MeetingSchedulingService(client_factory=lambda _credentials: graph_client)
    app.dependency_overrides[get_scheduling_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def reset_settings() -> Generator[None, None, None]:
    get_settings.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()

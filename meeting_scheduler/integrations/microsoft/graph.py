from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import httpx

from meeting_scheduler.core.errors import InternalError, MeetingCreationError
from meeting_scheduler.integrations.microsoft.auth import (
    AccessToken,
    ProviderCredentials,
    TokenCache,
    fetch_access_token,
)
from meeting_scheduler.schemas import MeetingRequest

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
DEFAULT_LOGIN_BASE_URL = "https://login.microsoftonline.com"
DEFAULT_SCOPE = "https://graph.microsoft.com/.default"
DEFAULT_TIMEOUT_SECONDS = 30.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _encode_graph_datetime(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def build_meeting_payload(request: MeetingRequest) -> dict[str, Any]:
    """Translate a validated request into the onlineMeetings request body."""

    payload: dict[str, Any] = {
        "startDateTime": _encode_graph_datetime(request.start_time),
        "endDateTime": _encode_graph_datetime(request.end_time),
        "subject": request.subject,
        "allowAttendeeToEnableCamera": request.allow_camera,
        "allowAttendeeToEnableMic": request.allow_microphone,
        "allowRecording": request.allow_recording,
        "allowMeetingChat": "enabled",
        "allowedPresenters": "everyone",
    }
    if request.description:
        payload["externalId"] = request.description
    if request.attendees:
        payload["participants"] = {
            "attendees": [{"upn": email, "role": "attendee"} for email in request.attendees]
        }
    return payload


class GraphClient:
    """Microsoft Graph client for creating Teams online meetings.

    Authenticates lazily with the client-credentials grant and keeps the
    bearer token in a ``TokenCache`` until shortly before it expires. Each
    operation makes exactly one attempt per remote call.
    """

    def __init__(
        self,
        credentials: ProviderCredentials,
        *,
        http_client: httpx.Client | None = None,
        token_cache: TokenCache | None = None,
        graph_base_url: str = DEFAULT_GRAPH_BASE_URL,
        login_base_url: str = DEFAULT_LOGIN_BASE_URL,
        scope: str = DEFAULT_SCOPE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._credentials = credentials
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)
        self._token_cache = token_cache or TokenCache()
        self._graph_base_url = graph_base_url.rstrip("/")
        self._login_base_url = login_base_url
        self._scope = scope
        self._clock = clock

    @property
    def credentials(self) -> ProviderCredentials:
        return self._credentials

    @property
    def graph_base_url(self) -> str:
        return self._graph_base_url

    @property
    def login_base_url(self) -> str:
        return self._login_base_url

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def timeout(self) -> httpx.Timeout:
        return self._http.timeout

    def authenticate(self) -> None:
        """Make sure a valid access token is cached, fetching one if needed."""

        self._current_token()

    def _current_token(self) -> AccessToken:
        token = self._token_cache.get(self._clock())
        if token is not None:
            return token
        with self._token_cache.refresh_lock:
            # another caller may have refreshed while we waited
            token = self._token_cache.get(self._clock())
            if token is not None:
                return token
            token = fetch_access_token(
                self._http,
                self._credentials,
                login_base_url=self._login_base_url,
                scope=self._scope,
                now=self._clock(),
            )
            self._token_cache.store(token)
            return token

    def meetings_endpoint(self, acting_user_id: str | None = None) -> str:
        if acting_user_id:
            return f"{self._graph_base_url}/users/{acting_user_id}/onlineMeetings"
        return f"{self._graph_base_url}/me/onlineMeetings"

    def create_meeting(self, request: MeetingRequest, acting_user_id: str | None = None) -> dict[str, Any]:
        """Create an online meeting and return the raw Graph response."""

        token = self._current_token()
        endpoint = self.meetings_endpoint(acting_user_id)
        logger.info(
            "Creating Teams meeting %r from %s to %s",
            request.subject,
            request.start_time.isoformat(),
            request.end_time.isoformat(),
        )
        try:
            response = self._http.post(
                endpoint,
                json=build_meeting_payload(request),
                headers={"Authorization": f"Bearer {token.value}"},
            )
        except httpx.HTTPError as exc:
            raise InternalError(f"Failed to create Teams meeting: {exc}") from exc

        if not response.is_success:
            raise MeetingCreationError(
                f"Meeting creation failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise InternalError("Meeting creation returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise InternalError("Meeting creation returned an unexpected response shape")
        return data

    def close(self) -> None:
        if self._owns_http_client:
            self._http.close()

    def __enter__(self) -> GraphClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["GraphClient", "build_meeting_payload"]

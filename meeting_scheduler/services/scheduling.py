from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from functools import lru_cache
from typing import Any

import httpx

from meeting_scheduler.core.config import get_settings
from meeting_scheduler.core.errors import ConfigurationError, InternalError, SchedulerError
from meeting_scheduler.integrations.microsoft.auth import ProviderCredentials
from meeting_scheduler.integrations.microsoft.graph import GraphClient
from meeting_scheduler.schemas import ExecutionConfig, MeetingRequest, MeetingResult
from meeting_scheduler.services.normalizer import normalize_meeting_response
from meeting_scheduler.services.validation import validate_meeting_request

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ProviderCredentials], GraphClient]


@lru_cache(1)
def get_http_client() -> httpx.Client:
    """Connection pool shared by every cached GraphClient."""

    return httpx.Client(timeout=get_settings().graph_timeout_seconds)


@lru_cache(maxsize=32)
def get_graph_client(credentials: ProviderCredentials) -> GraphClient:
    """Return the shared client for a credential set so its token cache is reused."""

    settings = get_settings()
    return GraphClient(
        credentials,
        http_client=get_http_client(),
        graph_base_url=settings.graph_base_url,
        login_base_url=settings.login_base_url,
        scope=settings.graph_scope,
    )


def resolve_credentials(config: ExecutionConfig | None = None) -> ProviderCredentials:
    """Combine per-request config with environment settings; request values win."""

    settings = get_settings()
    config = config or ExecutionConfig()
    client_id = config.client_id or settings.client_id
    client_secret = config.client_secret or settings.client_secret
    tenant_id = config.tenant_id or settings.tenant_id
    missing = [
        name
        for name, value in (("client_id", client_id), ("client_secret", client_secret), ("tenant_id", tenant_id))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            "Missing required Microsoft Graph API configuration",
            details={"missing_keys": missing},
        )
    return ProviderCredentials(
        client_id=client_id,
        client_secret=client_secret,
        tenant_id=tenant_id,
        acting_user_id=config.user_id or settings.user_id,
    )


class MeetingSchedulingService:
    """Runs validation, meeting creation, and response normalization for one invocation."""

    def __init__(self, client_factory: ClientFactory = get_graph_client) -> None:
        self._client_factory = client_factory

    def validate(self, payload: Mapping[str, Any] | MeetingRequest, *, now: datetime | None = None) -> MeetingRequest:
        return validate_meeting_request(payload, now=now)

    def schedule_meeting(
        self,
        request: MeetingRequest,
        credentials: ProviderCredentials,
        acting_user_id: str | None = None,
    ) -> MeetingResult:
        client = self._client_factory(credentials)
        try:
            raw = client.create_meeting(request, acting_user_id or credentials.acting_user_id)
            return normalize_meeting_response(raw, request)
        except SchedulerError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure while creating Teams meeting")
            raise InternalError(f"Failed to create Teams meeting: {exc}") from exc

    def execute(
        self,
        payload: Mapping[str, Any],
        credentials: ProviderCredentials,
        acting_user_id: str | None = None,
    ) -> MeetingResult:
        request = self.validate(payload)
        return self.schedule_meeting(request, credentials, acting_user_id)


def validate(payload: Mapping[str, Any] | MeetingRequest) -> MeetingRequest:
    return validate_meeting_request(payload)


def schedule_meeting(
    request: MeetingRequest,
    credentials: ProviderCredentials,
    acting_user_id: str | None = None,
) -> MeetingResult:
    return MeetingSchedulingService().schedule_meeting(request, credentials, acting_user_id)


__all__ = [
    "MeetingSchedulingService",
    "get_graph_client",
    "get_http_client",
    "resolve_credentials",
    "schedule_meeting",
    "validate",
]

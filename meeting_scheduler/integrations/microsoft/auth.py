from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import httpx

from meeting_scheduler.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_EXPIRY_MARGIN = timedelta(seconds=60)
CLIENT_CREDENTIALS_GRANT = "client_credentials"


@dataclass(frozen=True, slots=True)
class ProviderCredentials:
    client_id: str
    client_secret: str = field(repr=False)
    tenant_id: str
    acting_user_id: str | None = None


@dataclass(frozen=True, slots=True)
class AccessToken:
    value: str = field(repr=False)
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class TokenCache:
    """Holds the current access token; renewals replace it, never mutate it.

    One cache belongs to one client by default. Pass the same instance to
    several clients to share a token between them.
    """

    def __init__(self) -> None:
        self._token: AccessToken | None = None
        self.refresh_lock = threading.Lock()

    def get(self, now: datetime) -> AccessToken | None:
        token = self._token
        if token is not None and token.is_valid(now):
            return token
        return None

    def store(self, token: AccessToken) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


def token_url(login_base_url: str, tenant_id: str) -> str:
    return f"{login_base_url.rstrip('/')}/{tenant_id}/oauth2/v2.0/token"


def fetch_access_token(
    http_client: httpx.Client,
    credentials: ProviderCredentials,
    *,
    login_base_url: str,
    scope: str,
    now: datetime,
) -> AccessToken:
    """Exchange client credentials for a bearer token (one attempt, no retry)."""

    form = {
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "scope": scope,
        "grant_type": CLIENT_CREDENTIALS_GRANT,
    }
    logger.info("Requesting Microsoft Graph access token for tenant %s", credentials.tenant_id)
    try:
        response = http_client.post(token_url(login_base_url, credentials.tenant_id), data=form)
    except httpx.HTTPError as exc:
        raise AuthenticationError(f"Failed to authenticate with Microsoft Graph: {exc}") from exc

    if not response.is_success:
        raise AuthenticationError(
            f"Authentication failed: {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )

    try:
        data = response.json()
        value = data["access_token"]
        expires_in = int(data["expires_in"])
    except (ValueError, KeyError, TypeError) as exc:
        raise AuthenticationError(
            "Authentication failed: malformed token response",
            status_code=response.status_code,
        ) from exc
    if not isinstance(value, str) or not value:
        raise AuthenticationError("Authentication failed: token response has no access token")

    expires_at = now + timedelta(seconds=expires_in) - TOKEN_EXPIRY_MARGIN
    logger.debug("Access token for tenant %s valid until %s", credentials.tenant_id, expires_at.isoformat())
    return AccessToken(value=value, expires_at=expires_at)


__all__ = [
    "AccessToken",
    "ProviderCredentials",
    "TOKEN_EXPIRY_MARGIN",
    "TokenCache",
    "fetch_access_token",
    "token_url",
]

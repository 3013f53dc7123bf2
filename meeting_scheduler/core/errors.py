from __future__ import annotations

from typing import Any


class SchedulerError(Exception):
    """Base error carrying a stable error code for the execution envelope."""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error_code": self.code, "error_message": self.message}
        if self.details:
            payload["error_details"] = self.details
        return payload


class MeetingValidationError(SchedulerError):
    code = "VALIDATION_ERROR"
    http_status = 400


class ConfigurationError(SchedulerError):
    code = "CONFIGURATION_ERROR"
    http_status = 400


class InternalError(SchedulerError):
    code = "INTERNAL_ERROR"
    http_status = 500


class ProviderError(SchedulerError):
    """Failure reported by the remote provider, with its status code and raw body."""

    hint = ""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if body:
            details["provider_error"] = body
        if self.hint:
            message = f"{message} - {self.hint}"
        super().__init__(message, details=details or None)
        self.status_code = status_code
        self.body = body


class AuthenticationError(ProviderError):
    code = "AUTHENTICATION_ERROR"
    http_status = 401
    hint = "Please verify your Microsoft Graph API credentials"


class MeetingCreationError(ProviderError):
    code = "MEETING_CREATION_ERROR"
    http_status = 502
    hint = "Please check if the user has required permissions"


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "InternalError",
    "MeetingCreationError",
    "MeetingValidationError",
    "ProviderError",
    "SchedulerError",
]

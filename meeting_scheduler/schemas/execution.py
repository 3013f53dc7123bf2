from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from .meeting import MeetingResult


class ExecutionConfig(BaseModel):
    client_id: str | None = None
    client_secret: str | None = None
    tenant_id: str | None = None
    user_id: str | None = None


class ExecuteRequest(BaseModel):
    input_data: Any = None
    config: ExecutionConfig | None = None


class ExecutionEnvelope(BaseModel):
    """Uniform response body for every tool invocation."""

    execution_id: str
    status: Literal["success", "error"]
    data: MeetingResult | None = None
    error_code: str | None = None
    error_message: str | None = None
    error_details: dict[str, Any] | None = None
    timestamp: str = Field(description="ISO-8601 UTC timestamp of the response")

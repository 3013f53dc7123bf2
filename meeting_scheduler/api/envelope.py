from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone

from meeting_scheduler.core.errors import SchedulerError
from meeting_scheduler.schemas import ExecutionEnvelope, MeetingResult


def new_execution_id() -> str:
    return f"exec_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_envelope(execution_id: str, result: MeetingResult) -> ExecutionEnvelope:
    return ExecutionEnvelope(execution_id=execution_id, status="success", data=result, timestamp=_timestamp())


def error_envelope(execution_id: str, error: SchedulerError) -> ExecutionEnvelope:
    return ExecutionEnvelope(execution_id=execution_id, status="error", timestamp=_timestamp(), **error.to_dict())


__all__ = ["error_envelope", "new_execution_id", "success_envelope"]

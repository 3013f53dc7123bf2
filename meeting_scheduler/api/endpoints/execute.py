from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status

from meeting_scheduler.api.envelope import error_envelope, new_execution_id, success_envelope
from meeting_scheduler.core.config import get_settings
from meeting_scheduler.core.errors import SchedulerError
from meeting_scheduler.schemas import ExecuteRequest, ExecutionEnvelope
from meeting_scheduler.services.scheduling import MeetingSchedulingService, resolve_credentials

logger = logging.getLogger(__name__)

router = APIRouter()

_scheduling_service = MeetingSchedulingService()


def get_scheduling_service() -> MeetingSchedulingService:
    return _scheduling_service


def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
    settings = get_settings()
    if not settings.api_key_auth:
        return
    if not x_api_key or x_api_key not in settings.api_keys:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key")


@router.post(
    "/execute",
    response_model=ExecutionEnvelope,
    response_model_exclude_none=True,
    dependencies=[Depends(require_api_key)],
)
def execute_tool(
    payload: ExecuteRequest,
    response: Response,
    service: MeetingSchedulingService = Depends(get_scheduling_service),
) -> ExecutionEnvelope:
    execution_id = new_execution_id()
    logger.info("Executing meeting-scheduler tool with execution ID: %s", execution_id)

    input_data = payload.input_data if payload.input_data is not None else {}
    try:
        credentials = resolve_credentials(payload.config)
        result = service.execute(input_data, credentials)
    except SchedulerError as exc:
        logger.warning("Execution %s failed with %s: %s", execution_id, exc.code, exc.message)
        response.status_code = exc.http_status
        return error_envelope(execution_id, exc)

    return success_envelope(execution_id, result)

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from meeting_scheduler.services.normalizer import TOOL_VERSION
from meeting_scheduler.services.validation import MAX_ATTENDEES, MAX_DESCRIPTION_LENGTH, MAX_SUBJECT_LENGTH

router = APIRouter()

TOOL_METADATA = {
    "name": "meeting-scheduler",
    "description": "Schedules meetings through Microsoft Teams using Microsoft Graph API",
    "version": TOOL_VERSION,
    "capabilities": ["meeting-scheduling", "teams-integration", "calendar-management"],
}

_ISO_EXAMPLE = "ISO format (e.g., 2025-09-03T14:30:00Z)"

INPUT_SCHEMA = {
    "subject": {
        "type": "string",
        "required": True,
        "description": "Subject/title of the meeting",
        "minLength": 1,
        "maxLength": MAX_SUBJECT_LENGTH,
    },
    "startDateTime": {"type": "string", "required": True, "description": f"Start date and time in {_ISO_EXAMPLE}"},
    "endDateTime": {"type": "string", "required": True, "description": f"End date and time in {_ISO_EXAMPLE}"},
    "attendees": {
        "type": "array",
        "required": False,
        "description": "List of attendee email addresses",
        "items": {"type": "string"},
        "maxItems": MAX_ATTENDEES,
    },
    "description": {
        "type": "string",
        "required": False,
        "description": "Optional meeting description",
        "maxLength": MAX_DESCRIPTION_LENGTH,
    },
    "allowCamera": {"type": "boolean", "required": False, "default": True},
    "allowMicrophone": {"type": "boolean", "required": False, "default": True},
    "allowRecording": {"type": "boolean", "required": False, "default": False},
}

CONFIG_SCHEMA = {
    "client_id": {"type": "apiKey", "required": True, "description": "Microsoft Graph API client ID"},
    "client_secret": {"type": "apiKey", "required": True, "description": "Microsoft Graph API client secret"},
    "tenant_id": {"type": "string", "required": True, "description": "Microsoft Azure tenant ID"},
    "user_id": {
        "type": "string",
        "required": False,
        "description": "User ID or email for meeting creation (when using application permissions)",
    },
}


@router.get("/")
def service_info() -> dict:
    return {
        "name": "Microsoft Teams Meeting Scheduler",
        "version": TOOL_VERSION,
        "endpoints": {
            "health": "GET /health",
            "schema": "GET /schema",
            "execute": "POST /api/execute",
        },
    }


@router.get("/health")
def health() -> dict:
    return {
        "status": "healthy",
        "version": TOOL_VERSION,
        "tool_metadata": TOOL_METADATA,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/schema")
def tool_schema() -> dict:
    return {"metadata": TOOL_METADATA, "schema": {"input": INPUT_SCHEMA, "config": CONFIG_SCHEMA}}

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from meeting_scheduler.core.errors import MeetingValidationError
from meeting_scheduler.schemas import MeetingRequest

MAX_SUBJECT_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 1000
MAX_ATTENDEES = 50

_TIMESTAMP_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{3}|\.\d{6})?)?(Z|[+-]\d{2}:\d{2})?$"
)
_EMAIL_PATTERN = re.compile(r"^[\w.-]+@[\w.-]+\.[a-zA-Z]{2,}$")

# public name -> attribute name
_FIELD_NAMES = {
    "subject": "subject",
    "startDateTime": "start_time",
    "endDateTime": "end_time",
    "attendees": "attendees",
    "description": "description",
    "allowCamera": "allow_camera",
    "allowMicrophone": "allow_microphone",
    "allowRecording": "allow_recording",
}


def validate_meeting_request(
    payload: Mapping[str, Any] | MeetingRequest,
    *,
    now: datetime | None = None,
) -> MeetingRequest:
    """Check a raw meeting payload and return the normalized, defaulted request.

    Rules run in a fixed order and the first violation is raised as
    ``MeetingValidationError``. ``now`` defaults to the current UTC time, read
    once per call.
    """

    if isinstance(payload, MeetingRequest):
        payload = payload.model_dump(by_alias=True)
    if not isinstance(payload, Mapping):
        raise MeetingValidationError("Input must be an object")

    fields = _collect_fields(payload)

    missing = [name for name in ("subject", "startDateTime", "endDateTime") if _is_blank(fields.get(name))]
    if missing:
        raise MeetingValidationError("Missing required input fields", details={"missing_fields": missing})

    start = parse_timestamp(fields["startDateTime"])
    end = parse_timestamp(fields["endDateTime"])
    if start is None or end is None:
        raise MeetingValidationError("Invalid date format. Please use ISO format (e.g., 2025-09-03T14:30:00Z)")

    if end <= start:
        raise MeetingValidationError("End time must be after start time")

    current = now if now is not None else datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    if start < current:
        raise MeetingValidationError("Cannot schedule meetings in the past")

    attendees = _validate_attendees(fields.get("attendees"))

    description = fields.get("description")
    if description is not None:
        if not isinstance(description, str):
            raise MeetingValidationError("Description must be a string")
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise MeetingValidationError(
                f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
            )
    subject = fields["subject"]
    if not isinstance(subject, str) or not 1 <= len(subject) <= MAX_SUBJECT_LENGTH:
        raise MeetingValidationError(f"Subject must be between 1 and {MAX_SUBJECT_LENGTH} characters")

    values: dict[str, Any] = {
        "subject": subject,
        "start_time": start,
        "end_time": end,
        "attendees": attendees,
        "description": description or None,
    }
    for name in ("allowCamera", "allowMicrophone", "allowRecording"):
        flag = fields.get(name)
        if flag is None:
            continue
        if not isinstance(flag, bool):
            raise MeetingValidationError(f"{name} must be a boolean")
        values[_FIELD_NAMES[name]] = flag

    return MeetingRequest(**values)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and _TIMESTAMP_PATTERN.match(value.strip()):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _collect_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for public_name, attribute in _FIELD_NAMES.items():
        if public_name in payload:
            fields[public_name] = payload[public_name]
        elif attribute in payload:
            fields[public_name] = payload[attribute]
    return fields


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _validate_attendees(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
        raise MeetingValidationError("Attendees must be a list of email addresses")
    if len(value) > MAX_ATTENDEES:
        raise MeetingValidationError(f"At most {MAX_ATTENDEES} attendees are allowed")

    seen: set[str] = set()
    attendees: list[str] = []
    for item in value:
        if not isinstance(item, str) or not _EMAIL_PATTERN.match(item.strip()):
            raise MeetingValidationError(f"Invalid attendee email address: {item!r}")
        email = item.strip()
        key = email.lower()
        if key in seen:
            continue
        seen.add(key)
        attendees.append(email)
    return tuple(attendees)


__all__ = ["MAX_ATTENDEES", "parse_timestamp", "validate_meeting_request"]

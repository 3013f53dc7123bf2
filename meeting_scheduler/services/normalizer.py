from __future__ import annotations

from typing import Any

from meeting_scheduler.schemas import MeetingInfo, MeetingRequest, MeetingResult, MeetingSettings, ResultMetadata

TOOL_VERSION = "1.0.0"
PROVIDER_NAME = "Microsoft Teams via Graph API"


def _nested(payload: Any, *keys: str) -> Any:
    current = payload
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def build_instructions(request: MeetingRequest) -> list[str]:
    recording = (
        "Recording is enabled for this meeting."
        if request.allow_recording
        else "Recording is disabled for this meeting."
    )
    return [
        "Share the join URL with attendees to join the meeting.",
        "Meeting will be available 15 minutes before the start time.",
        recording,
    ]


def normalize_meeting_response(raw: dict[str, Any], request: MeetingRequest) -> MeetingResult:
    """Map a Graph onlineMeeting response onto the stable result shape.

    Missing optional sections of the provider response become ``None``.
    ``attendees_count`` is taken from the validated request because the
    provider does not always echo participants.
    """

    organizer = _nested(raw, "participants", "organizer", "identity", "user", "displayName") or _nested(
        raw, "organizer", "user", "displayName"
    )
    meeting = MeetingInfo(
        meeting_id=_optional_str(raw.get("id")),
        join_url=_optional_str(raw.get("joinUrl") or raw.get("joinWebUrl")),
        conference_id=_optional_str(_nested(raw, "audioConferencing", "conferenceId")),
        dial_in_url=_optional_str(_nested(raw, "audioConferencing", "dialinUrl")),
        subject=_optional_str(raw.get("subject")),
        start_time=_optional_str(raw.get("startDateTime")),
        end_time=_optional_str(raw.get("endDateTime")),
        created_at=_optional_str(raw.get("creationDateTime")),
        organizer=_optional_str(organizer),
        settings=MeetingSettings(
            allow_camera=_optional_bool(raw.get("allowAttendeeToEnableCamera")),
            allow_microphone=_optional_bool(raw.get("allowAttendeeToEnableMic")),
            allow_recording=_optional_bool(raw.get("allowRecording")),
            chat_enabled=raw.get("allowMeetingChat") == "enabled",
        ),
    )
    return MeetingResult(
        meeting=meeting,
        summary=f'Successfully created Teams meeting "{request.subject}" for {request.start_time.isoformat()}',
        attendees_count=len(request.attendees),
        instructions=build_instructions(request),
        metadata=ResultMetadata(tool_version=TOOL_VERSION, provider=PROVIDER_NAME),
    )


__all__ = ["PROVIDER_NAME", "TOOL_VERSION", "build_instructions", "normalize_meeting_response"]

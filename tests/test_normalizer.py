from __future__ import annotations

from datetime import datetime, timezone

from meeting_scheduler.schemas import MeetingRequest
from meeting_scheduler.services.normalizer import normalize_meeting_response


def _request(**overrides) -> MeetingRequest:
    values = {
        "subject": "Design review",
        "start_time": datetime(2030, 3, 4, 15, 0, tzinfo=timezone.utc),
        "end_time": datetime(2030, 3, 4, 16, 0, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return MeetingRequest(**values)


def test_full_provider_response() -> None:
    raw = {
        "id": "abc",
        "joinUrl": "https://teams.microsoft.com/l/meetup-join/abc",
        "subject": "Design review",
        "startDateTime": "2030-03-04T15:00:00Z",
        "endDateTime": "2030-03-04T16:00:00Z",
        "creationDateTime": "2030-03-01T08:00:00Z",
        "audioConferencing": {"conferenceId": "998877", "dialinUrl": "https://dialin.teams.microsoft.com/x"},
        "participants": {"organizer": {"identity": {"user": {"displayName": "Ada Lovelace"}}}},
        "allowAttendeeToEnableCamera": False,
        "allowAttendeeToEnableMic": True,
        "allowRecording": True,
        "allowMeetingChat": "enabled",
    }

    result = normalize_meeting_response(raw, _request(allow_recording=True, attendees=("a@example.com", "b@example.com")))

    meeting = result.meeting
    assert meeting.meeting_id == "abc"
    assert meeting.join_url == "https://teams.microsoft.com/l/meetup-join/abc"
    assert meeting.conference_id == "998877"
    assert meeting.dial_in_url == "https://dialin.teams.microsoft.com/x"
    assert meeting.organizer == "Ada Lovelace"
    assert meeting.created_at == "2030-03-01T08:00:00Z"
    assert meeting.settings.allow_camera is False
    assert meeting.settings.allow_recording is True
    assert meeting.settings.chat_enabled is True
    assert result.attendees_count == 2
    assert result.summary == 'Successfully created Teams meeting "Design review" for 2030-03-04T15:00:00+00:00'
    assert result.instructions[-1] == "Recording is enabled for this meeting."


def test_sparse_provider_response_degrades_to_none() -> None:
    result = normalize_meeting_response({"id": "abc", "audioConferencing": None, "organizer": {}}, _request())

    meeting = result.meeting
    assert meeting.join_url is None
    assert meeting.conference_id is None
    assert meeting.dial_in_url is None
    assert meeting.organizer is None
    assert meeting.settings.allow_camera is None
    assert meeting.settings.chat_enabled is False
    assert result.attendees_count == 0
    assert len(result.instructions) == 3
    assert result.instructions[-1] == "Recording is disabled for this meeting."


def test_legacy_organizer_shape() -> None:
    result = normalize_meeting_response({"organizer": {"user": {"displayName": "Grace Hopper"}}}, _request())

    assert result.meeting.organizer == "Grace Hopper"


def test_metadata_names_provider() -> None:
    result = normalize_meeting_response({}, _request())

    assert result.metadata.provider == "Microsoft Teams via Graph API"
    assert result.metadata.tool_version == "1.0.0"

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MeetingRequest(BaseModel):
    """Validated, fully-defaulted meeting request."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    subject: str = Field(min_length=1, max_length=255)
    start_time: datetime = Field(alias="startDateTime")
    end_time: datetime = Field(alias="endDateTime")
    attendees: tuple[str, ...] = ()
    description: str | None = Field(default=None, max_length=1000)
    allow_camera: bool = Field(default=True, alias="allowCamera")
    allow_microphone: bool = Field(default=True, alias="allowMicrophone")
    allow_recording: bool = Field(default=False, alias="allowRecording")


class MeetingSettings(BaseModel):
    allow_camera: bool | None = None
    allow_microphone: bool | None = None
    allow_recording: bool | None = None
    chat_enabled: bool = False


class MeetingInfo(BaseModel):
    meeting_id: str | None = None
    join_url: str | None = None
    conference_id: str | None = None
    dial_in_url: str | None = None
    subject: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    created_at: str | None = None
    organizer: str | None = None
    settings: MeetingSettings


class ResultMetadata(BaseModel):
    tool_version: str
    provider: str


class MeetingResult(BaseModel):
    meeting: MeetingInfo
    summary: str
    attendees_count: int
    instructions: list[str]
    metadata: ResultMetadata

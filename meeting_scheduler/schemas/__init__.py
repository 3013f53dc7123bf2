from .execution import ExecuteRequest, ExecutionConfig, ExecutionEnvelope
from .meeting import MeetingInfo, MeetingRequest, MeetingResult, MeetingSettings, ResultMetadata

__all__ = [
    "ExecuteRequest",
    "ExecutionConfig",
    "ExecutionEnvelope",
    "MeetingInfo",
    "MeetingRequest",
    "MeetingResult",
    "MeetingSettings",
    "ResultMetadata",
]

from __future__ import annotations

import argparse
import sys

import uvicorn

from meeting_scheduler.api.envelope import error_envelope, new_execution_id, success_envelope
from meeting_scheduler.core.config import get_settings
from meeting_scheduler.core.errors import SchedulerError
from meeting_scheduler.services.scheduling import MeetingSchedulingService, resolve_credentials


def schedule_from_args(args: argparse.Namespace, service: MeetingSchedulingService | None = None) -> int:
    payload: dict[str, object] = {
        "subject": args.subject,
        "startDateTime": args.start,
        "endDateTime": args.end,
    }
    if args.attendee:
        payload["attendees"] = args.attendee
    if args.description:
        payload["description"] = args.description
    if args.no_camera:
        payload["allowCamera"] = False
    if args.no_microphone:
        payload["allowMicrophone"] = False
    if args.record:
        payload["allowRecording"] = True

    service = service or MeetingSchedulingService()
    execution_id = new_execution_id()
    try:
        credentials = resolve_credentials()
        result = service.execute(payload, credentials, args.user_id)
    except SchedulerError as exc:
        print(error_envelope(execution_id, exc).model_dump_json(indent=2, exclude_none=True), file=sys.stderr)
        return 1
    print(success_envelope(execution_id, result).model_dump_json(indent=2, exclude_none=True))
    return 0


def serve(args: argparse.Namespace) -> int:
    settings = get_settings()
    uvicorn.run(
        "meeting_scheduler.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="meeting-scheduler", description="Schedule Microsoft Teams meetings")
    subparsers = parser.add_subparsers(dest="command", required=True)

    schedule = subparsers.add_parser("schedule", help="Create one Teams meeting")
    schedule.add_argument("--subject", required=True)
    schedule.add_argument("--start", required=True, help="ISO start time, e.g. 2025-09-03T14:30:00Z")
    schedule.add_argument("--end", required=True, help="ISO end time")
    schedule.add_argument("--attendee", action="append", help="Attendee email (repeatable)")
    schedule.add_argument("--description")
    schedule.add_argument("--user-id", help="Create the meeting on behalf of this user")
    schedule.add_argument("--no-camera", action="store_true")
    schedule.add_argument("--no-microphone", action="store_true")
    schedule.add_argument("--record", action="store_true")
    schedule.set_defaults(handler=schedule_from_args)

    server = subparsers.add_parser("serve", help="Run the HTTP API")
    server.add_argument("--host")
    server.add_argument("--port", type=int)
    server.set_defaults(handler=serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())

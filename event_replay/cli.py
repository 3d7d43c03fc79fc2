"""
Record and replay raw Android input events via ADB.

- ``--record PATH [-n N]`` captures ``adb shell getevent`` output into a log,
  optionally only from ``/dev/input/eventN``.
- ``--play PATH [--repeat] [--activity NAME]`` sends the log back with
  ``adb shell sendevent`` using the recorded timing.
- ``--show`` prints live events with capture timestamps without saving them.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .adb import DEFAULT_ADB, AdbClient, AdbError
from .console import Style, log
from .event_capture import DeviceFilter, RecordingError, record_stream, show_stream
from .replay_log import PlaybackScheduler, ReplayError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Record and replay input events from an Android device")
    parser.add_argument(
        "-e",
        "--adb",
        metavar="COMMAND",
        default=DEFAULT_ADB,
        help="adb binary and extra arguments (default: %(default)s)",
    )
    parser.add_argument("-s", "--serial", help="ADB serial/ip:port")
    parser.add_argument(
        "-d",
        "--device",
        action="store_true",
        help="Direct commands to the only connected USB device (adb -d)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List input devices (getevent -i) before recording, playing or showing",
    )
    parser.add_argument("-r", "--record", type=Path, metavar="PATH", help="Record events to the log file")
    parser.add_argument(
        "-n",
        "--event",
        type=int,
        metavar="N",
        help="Only record events from /dev/input/eventN",
    )
    parser.add_argument("-p", "--play", type=Path, metavar="PATH", help="Play the recorded log file")
    parser.add_argument(
        "--repeat",
        action="store_true",
        help="Replay the whole log (default: only the first event)",
    )
    parser.add_argument("--activity", help="Start this activity before playing")
    parser.add_argument("--show", action="store_true", help="Show all events from the device")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def run_record(client: AdbClient, args: argparse.Namespace) -> int:
    client.check_permission()
    device_filter = DeviceFilter(args.event) if args.event is not None else None
    with client.getevent() as lines:
        record_stream(lines, args.record, device_filter)
    return 0


def run_play(client: AdbClient, args: argparse.Namespace) -> int:
    if args.activity:
        client.go_to_activity(args.activity)
    PlaybackScheduler(client.sendevent).play(args.play, repeat=args.repeat)
    return 0


def run_show(client: AdbClient) -> int:
    client.check_permission()
    with client.getevent("-r", "-q") as lines:
        show_stream(lines)
    return 0


def print_usage() -> int:
    log(Style.ERROR, "Add --record [Path] to record")
    log(Style.ERROR, "Add --play [Path] to play")
    log(Style.ERROR, "Add --show to display live events")
    return 2


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    client = AdbClient(args.adb, serial=args.serial, usb_only=args.device)

    if not (args.record or args.play or args.show):
        return print_usage()

    try:
        if args.list:
            log(Style.INFO, "List all events")
            for line in client.list_input_devices():
                log(Style.PLAIN, line)

        if args.record:
            return run_record(client, args)
        if args.play:
            return run_play(client, args)
        return run_show(client)
    except ReplayError as exc:
        log(Style.ERROR, f"Replay failed: {exc}", file=sys.stderr)
    except RecordingError as exc:
        log(Style.ERROR, f"Recording failed: {exc}", file=sys.stderr)
    except (AdbError, OSError) as exc:
        log(Style.ERROR, f"Command failed: {exc}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

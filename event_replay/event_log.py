"""
On-disk log format shared by recording and playback.

One event per line: ``<timestamp_ms> <device> <type> <code> <value>`` with all
numbers in decimal. No header, no footer.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .getevent_parser import ParsedEvent

STORE_PATTERN = re.compile(r"(\S+) (\S+) (\S+) (\S+) (\S+)")
DECIMAL_PATTERN = re.compile(r"0|-?[1-9][0-9]*")


@dataclass(frozen=True)
class RecordedEvent:
    timestamp: int
    device: str
    type: int
    code: int
    value: int

    @classmethod
    def from_parsed(cls, event: ParsedEvent, timestamp: int) -> "RecordedEvent":
        return cls(timestamp, event.device, event.type, event.code, event.value)


def now_millis() -> int:
    return int(round(time.time() * 1000))


def format_log_line(event: RecordedEvent) -> str:
    return f"{event.timestamp} {event.device} {event.type} {event.code} {event.value}"


def parse_log_line(line: str) -> Optional[RecordedEvent]:
    match = STORE_PATTERN.fullmatch(line.rstrip("\r\n"))
    if not match:
        return None

    timestamp, device, ev_type, code, value = match.groups()
    numbers = (timestamp, ev_type, code, value)
    if not all(DECIMAL_PATTERN.fullmatch(token) for token in numbers):
        return None
    return RecordedEvent(int(timestamp), device, int(ev_type), int(code), int(value))


def parse_log(lines: Iterable[str]) -> List[RecordedEvent]:
    events: List[RecordedEvent] = []
    for line in lines:
        event = parse_log_line(line)
        if event is not None:
            events.append(event)
    return events


def load_log(path: Path) -> List[RecordedEvent]:
    return parse_log(Path(path).read_text(encoding="utf-8").split("\n"))

"""
Parse ``adb shell getevent`` output into structured input events.

getevent prints one event per line as ``<device>: <type> <code> <value>`` with
the three numbers in hex. Depending on flags the line may carry a timestamp
column or other text in front, so the pattern is anchored on the end of the
line and everything before the device token is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

EVENT_PATTERN = re.compile(r"(\S+):\s+([0-9a-fA-F]+)\s+([0-9a-fA-F]+)\s+([0-9a-fA-F]+)$")


@dataclass(frozen=True)
class ParsedEvent:
    device: str
    type: int
    code: int
    value: int


def parse_event_line(line: str) -> Optional[ParsedEvent]:
    match = EVENT_PATTERN.search(line.rstrip())
    if not match:
        return None

    device, ev_type, code, value = match.groups()
    return ParsedEvent(device, int(ev_type, 16), int(code, 16), int(value, 16))


def iter_events(lines: Iterable[str]) -> Iterator[ParsedEvent]:
    for line in lines:
        event = parse_event_line(line)
        if event is not None:
            yield event

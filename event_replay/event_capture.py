"""
Record input events from an Android device via `adb shell getevent` into a
replayable log file.

Each parsed line is stamped with the wall-clock time at which it was read,
optionally filtered to a single `/dev/input/eventN` node, written to the log
and echoed to the console. The log is flushed after every line so an
interrupted session keeps everything captured up to that point.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, TextIO

from .console import Style, log
from .event_log import RecordedEvent, format_log_line, now_millis
from .getevent_parser import ParsedEvent, iter_events

INPUT_DEVICE_TEMPLATE = "/dev/input/event{index}"


class RecordingError(RuntimeError):
    pass


@dataclass(frozen=True)
class DeviceFilter:
    index: int

    @property
    def device_path(self) -> str:
        return INPUT_DEVICE_TEMPLATE.format(index=self.index)

    def accepts(self, event: ParsedEvent) -> bool:
        return event.device == self.device_path


class RecordingSink:
    def __init__(
        self,
        device_filter: Optional[DeviceFilter] = None,
        clock: Callable[[], int] = now_millis,
        echo: bool = True,
    ) -> None:
        self.device_filter = device_filter
        self.clock = clock
        self.echo = echo
        self.lines_written = 0
        self._output: Optional[TextIO] = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._output is not None

    def begin(self, output_path: Path) -> None:
        if self._output is not None or self._closed:
            raise RecordingError("Recording session already started")
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self._output = output_path.open("w", encoding="utf-8", newline="\n")

    def submit(self, event: ParsedEvent) -> Optional[RecordedEvent]:
        if self._output is None:
            raise RecordingError("submit() called outside of an open recording session")

        if self.device_filter is not None and not self.device_filter.accepts(event):
            return None

        recorded = RecordedEvent.from_parsed(event, self.clock())
        line = format_log_line(recorded)
        self._output.write(line + "\n")
        self._output.flush()
        self.lines_written += 1
        if self.echo:
            log(Style.PLAIN, line)
        return recorded

    def end(self) -> None:
        if self._output is None:
            return
        try:
            self._output.flush()
        finally:
            self._output.close()
            self._output = None
            self._closed = True

    @contextmanager
    def session(self, output_path: Path) -> Iterator["RecordingSink"]:
        self.begin(output_path)
        try:
            yield self
        finally:
            self.end()


def record_stream(
    lines: Iterable[str],
    output_path: Path,
    device_filter: Optional[DeviceFilter] = None,
    clock: Callable[[], int] = now_millis,
) -> int:
    sink = RecordingSink(device_filter=device_filter, clock=clock)
    log(Style.INFO, "Start recording")
    with sink.session(output_path):
        try:
            for event in iter_events(lines):
                sink.submit(event)
        except KeyboardInterrupt:
            log(Style.WARNING, "Stopping capture...")
    log(Style.INFO, f"End recording ({sink.lines_written} events saved to {output_path})")
    return sink.lines_written


def show_stream(lines: Iterable[str], clock: Callable[[], int] = now_millis) -> int:
    shown = 0
    try:
        for line in lines:
            millis = clock()
            text = line.strip()
            if text:
                log(Style.PLAIN, f"{millis} {text}")
                shown += 1
    except KeyboardInterrupt:
        log(Style.WARNING, "Stopping...")
    return shown

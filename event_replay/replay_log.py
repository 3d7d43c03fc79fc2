"""
Replay a recorded input-event log on an Android device via ADB.

Features
- Load logs produced by ``event_capture.py`` (``<ms> <device> <type> <code> <value>``
  per line), skipping blank or malformed lines.
- Respect real-world timing by sleeping for the recorded gap between
  consecutive events before sending the next one.
- Send each event with ``adb shell sendevent <device> <type> <code> <value>``
  and abort on the first command that fails.
- Without ``repeat`` only the first event is sent (single-shot trigger mode).
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Optional

from .adb import AdbResult
from .console import Style, log
from .event_log import RecordedEvent, load_log


class ReplayError(RuntimeError):
    pass


# -------------------- Timing helpers --------------------

def compute_delay(last_ts: Optional[int], next_ts: int) -> float:
    if last_ts is None:
        return 0.0
    raw_delay = next_ts - last_ts
    if raw_delay <= 0:
        return 0.0
    return raw_delay / 1000


def describe(event: RecordedEvent) -> str:
    return f"sendevent {event.device} {event.type} {event.code} {event.value}"


# -------------------- Playback --------------------

class PlaybackScheduler:
    def __init__(
        self,
        emit: Callable[[RecordedEvent], AdbResult],
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.emit = emit
        self.sleep = sleep

    def play(self, log_path: Path, repeat: bool = False) -> int:
        log(Style.INFO, "Start playing")
        events = load_log(log_path)
        last_ts: Optional[int] = None
        sent = 0

        for idx, event in enumerate(events, start=1):
            delay = compute_delay(last_ts, event.timestamp)
            if delay > 0:
                self.sleep(delay)

            log(Style.PLAIN, describe(event))
            result = self.emit(event)
            if result.returncode != 0:
                detail = result.stderr.strip() or f"exit status {result.returncode}"
                raise ReplayError(f"sendevent failed at event {idx}: {detail}")

            sent += 1
            last_ts = event.timestamp
            if not repeat:
                break

        log(Style.INFO, f"End playing ({sent} events sent)")
        return sent

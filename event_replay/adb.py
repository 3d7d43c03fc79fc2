"""
Thin wrappers around the ``adb`` binary.

Each one-shot command runs through ``subprocess.run`` and comes back as an
``AdbResult``; long-running commands such as ``getevent`` are exposed as a
context manager that always tears the child process down.
"""

from __future__ import annotations

import subprocess
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from .console import Style, log
from .event_log import RecordedEvent

DEFAULT_ADB = "adb"


class AdbError(RuntimeError):
    pass


@dataclass(frozen=True)
class AdbResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class AdbClient:
    def __init__(self, adb: str = DEFAULT_ADB, serial: Optional[str] = None, usb_only: bool = False) -> None:
        self.adb = adb
        self.serial = serial
        self.usb_only = usb_only

    @property
    def prefix(self) -> List[str]:
        cmd = self.adb.split()
        if self.serial:
            cmd.extend(["-s", self.serial])
        if self.usb_only:
            cmd.append("-d")
        return cmd

    def run(self, args: Sequence[str]) -> AdbResult:
        cmd = self.prefix + list(args)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise AdbError(f"adb not found: {cmd[0]}") from exc
        return AdbResult(result.returncode, result.stdout, result.stderr)

    def run_checked(self, args: Sequence[str], message: str) -> AdbResult:
        result = self.run(args)
        if not result.ok:
            raise AdbError(result.stderr.strip() or message)
        return result

    @contextmanager
    def stream(self, args: Sequence[str]) -> Iterator[Iterator[str]]:
        cmd = self.prefix + list(args)
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
            )
        except FileNotFoundError as exc:
            raise AdbError(f"adb not found: {cmd[0]}") from exc

        reached_eof = []

        def read_lines() -> Iterator[str]:
            yield from proc.stdout
            reached_eof.append(True)

        with proc:
            if not proc.stdout:
                raise AdbError("Failed to open adb stdout stream")
            try:
                yield read_lines()
            finally:
                # the child closed stdout on its own when the reader hit EOF
                if not reached_eof:
                    proc.terminate()
                try:
                    proc.wait(timeout=2)
                except subprocess.TimeoutExpired:
                    proc.kill()

                stderr_output = proc.stderr.read().strip() if proc.stderr else ""
                if stderr_output:
                    log(Style.WARNING, stderr_output, file=sys.stderr)

        if reached_eof and proc.returncode not in (0, None):
            raise AdbError(stderr_output or f"{' '.join(cmd)} exited with status {proc.returncode}")

    # -------------------- Device commands --------------------

    def check_permission(self) -> None:
        log(Style.INFO, "Checking permission")
        self.run_checked(["root"], "Insufficient permissions")

    def go_to_activity(self, activity: str) -> None:
        log(Style.INFO, f"Go to the activity: {activity}")
        self.run_checked(["shell", "am", "start", "-a", activity], f"Failed to start activity {activity}")

    def list_input_devices(self) -> List[str]:
        result = self.run_checked(["shell", "getevent", "-i"], "getevent -i failed")
        return [line.rstrip() for line in result.stdout.splitlines() if line.strip()]

    def getevent(self, *flags: str):
        return self.stream(["shell", "getevent", *flags])

    def sendevent(self, event: RecordedEvent) -> AdbResult:
        return self.run(
            ["shell", "sendevent", event.device, str(event.type), str(event.code), str(event.value)]
        )

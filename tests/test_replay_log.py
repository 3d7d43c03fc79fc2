"""Tests for the playback scheduler."""

import pytest

from event_replay.adb import AdbResult
from event_replay.replay_log import PlaybackScheduler, ReplayError, compute_delay


class FakeDevice:
    def __init__(self, fail_at=None):
        self.fail_at = fail_at
        self.sent = []

    def __call__(self, event):
        self.sent.append(event)
        if self.fail_at is not None and len(self.sent) == self.fail_at:
            return AdbResult(1, "", "sendevent: permission denied")
        return AdbResult(0)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_log(tmp_path):
    def _make(*lines):
        path = tmp_path / "play.log"
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path

    return _make


def log_lines(*timestamps):
    return [f"{ts} /dev/input/event2 3 53 {idx}" for idx, ts in enumerate(timestamps)]


@pytest.mark.parametrize(
    "last, nxt, expected",
    [(None, 500, 0.0), (100, 100, 0.0), (200, 100, 0.0), (100, 250, 0.15)],
)
def test_compute_delay(last, nxt, expected):
    assert compute_delay(last, nxt) == pytest.approx(expected)


def test_repeat_reproduces_recorded_spacing(make_log, sleeps):
    device = FakeDevice()
    scheduler = PlaybackScheduler(device, sleep=sleeps.append)

    sent = scheduler.play(make_log(*log_lines(0, 100, 100, 250)), repeat=True)

    assert sent == 4
    assert [e.value for e in device.sent] == [0, 1, 2, 3]
    assert sleeps == pytest.approx([0.1, 0.15])


def test_sleep_happens_before_the_delayed_event(make_log):
    timeline = []
    device = FakeDevice()

    def emit(event):
        timeline.append(("emit", event.timestamp))
        return device(event)

    scheduler = PlaybackScheduler(emit, sleep=lambda s: timeline.append(("sleep", s)))
    scheduler.play(make_log(*log_lines(0, 100)), repeat=True)

    assert timeline == [("emit", 0), ("sleep", 0.1), ("emit", 100)]


def test_without_repeat_only_first_event_is_sent(make_log, sleeps):
    device = FakeDevice()

    sent = PlaybackScheduler(device, sleep=sleeps.append).play(make_log(*log_lines(0, 10, 20, 30)))

    assert sent == 1
    assert len(device.sent) == 1
    assert sleeps == []


@pytest.mark.parametrize("count", [0, 1])
def test_without_repeat_short_logs(make_log, sleeps, count):
    device = FakeDevice()

    sent = PlaybackScheduler(device, sleep=sleeps.append).play(make_log(*log_lines(*range(count))))

    assert sent == count


def test_malformed_and_blank_lines_are_skipped(make_log, sleeps):
    device = FakeDevice()
    path = make_log(
        "100 /dev/input/event2 3 53 1",
        "this is not an event",
        "200 /dev/input/event2 3 54 2",
        "300 /dev/input/event2 0 0 0",
        "",
    )

    sent = PlaybackScheduler(device, sleep=sleeps.append).play(path, repeat=True)

    assert sent == 3


def test_command_failure_aborts_remaining_playback(make_log, sleeps):
    device = FakeDevice(fail_at=2)
    scheduler = PlaybackScheduler(device, sleep=sleeps.append)

    with pytest.raises(ReplayError, match="permission denied"):
        scheduler.play(make_log(*log_lines(0, 10, 20, 30, 40)), repeat=True)

    assert [e.timestamp for e in device.sent] == [0, 10]


def test_missing_log_is_fatal(tmp_path):
    with pytest.raises(OSError):
        PlaybackScheduler(FakeDevice()).play(tmp_path / "missing.log", repeat=True)

import threading

from focus_blocker.enforcer import BlockEvent
from focus_blocker.messages import MotivationSource
from focus_blocker.notifier import NotificationGate
from focus_blocker.snapshot import AISettings, make_snapshot

from conftest import FakeClock, at


class RecordingDisplay:
    def __init__(self, block: threading.Event | None = None, error: Exception | None = None):
        self.shown = []
        self.called = threading.Event()
        self._block = block
        self._error = error

    def __call__(self, app_name, message):
        self.shown.append((app_name, message))
        self.called.set()
        if self._block is not None:
            self._block.wait(5)
        if self._error is not None:
            raise self._error


class StaticClient:
    def __init__(self, *replies):
        self._replies = list(replies)
        self.calls = []

    def fetch_message(self, app_name, personality=""):
        self.calls.append((app_name, personality))
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def _event(name="chrome.exe", pid=1):
    return BlockEvent(process_name=name, pid=pid, detected_at=at(10, 0))


def _gate(logger, display, cooldown=60, client=None, ai=None):
    clock = FakeClock()
    snapshot = make_snapshot(cooldown_seconds=cooldown, ai=ai)
    gate = NotificationGate(snapshot, MotivationSource(client, logger), display, logger, clock=clock)
    return gate, clock


def test_two_matches_within_cooldown_fire_once(logger):
    display = RecordingDisplay()
    gate, clock = _gate(logger, display, cooldown=60)

    assert gate.request(_event()) is True
    clock.advance(5)
    assert gate.request(_event("discord.exe", 2)) is False

    assert display.called.wait(2)
    assert [app for app, _ in display.shown] == ["chrome.exe"]


def test_burst_fires_at_most_once_per_window(logger):
    display = RecordingDisplay()
    gate, clock = _gate(logger, display, cooldown=60)

    fired = []
    for _ in range(50):
        fired.append(gate.request(_event()))
        clock.advance(1)
    assert fired.count(True) == 1

    clock.advance(11)
    assert gate.request(_event()) is True


def test_fires_again_once_cooldown_elapsed(logger):
    gate, clock = _gate(logger, RecordingDisplay(), cooldown=60)
    assert gate.request(_event())
    clock.advance(59.9)
    assert not gate.request(_event())
    clock.advance(0.1)
    assert gate.request(_event())


def test_zero_cooldown_never_suppresses(logger):
    gate, _ = _gate(logger, RecordingDisplay(), cooldown=0)
    assert all(gate.request(_event()) for _ in range(5))


def test_concurrent_requests_fire_once(logger):
    gate, _ = _gate(logger, RecordingDisplay(), cooldown=60)
    results = []
    lock = threading.Lock()
    start = threading.Barrier(8)

    def worker():
        start.wait()
        fired = gate.request(_event())
        with lock:
            results.append(fired)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results.count(True) == 1


def test_blocking_display_does_not_block_request(logger):
    release = threading.Event()
    display = RecordingDisplay(block=release)
    gate, clock = _gate(logger, display, cooldown=0)
    try:
        assert gate.request(_event())
        assert display.called.wait(2)
        # First popup is still open; the caller is not held up
        clock.advance(1)
        assert gate.request(_event())
    finally:
        release.set()


def test_display_failure_is_contained(logger):
    display = RecordingDisplay(error=RuntimeError("no display"))
    gate, clock = _gate(logger, display, cooldown=10)
    assert gate.request(_event())
    assert display.called.wait(2)
    clock.advance(10)
    assert gate.request(_event())


def test_provider_message_is_displayed(logger):
    display = RecordingDisplay()
    client = StaticClient("Back to work!")
    gate, _ = _gate(logger, display, client=client, ai=AISettings(personality="strict"))

    gate.request(_event())

    assert display.called.wait(2)
    assert display.shown == [("chrome.exe", "Back to work!")]
    assert client.calls == [("chrome.exe", "strict")]


def test_ai_disabled_uses_default_message(logger):
    display = RecordingDisplay()
    client = StaticClient("unused")
    gate, _ = _gate(logger, display, client=client, ai=AISettings(enabled=False))

    gate.request(_event())

    assert display.called.wait(2)
    assert display.shown[0][1] == MotivationSource(None, logger).default_message
    assert client.calls == []


def test_cooldown_follows_config_update(logger):
    gate, clock = _gate(logger, RecordingDisplay(), cooldown=60)
    assert gate.request(_event())
    gate.update_config(make_snapshot(cooldown_seconds=5))
    clock.advance(5)
    assert gate.request(_event())

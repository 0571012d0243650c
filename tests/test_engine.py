import threading

from focus_blocker.enforcer import ProcessEnforcer
from focus_blocker.messages import MotivationSource
from focus_blocker.notifier import NotificationGate
from focus_blocker.schedule import ScheduleEvaluator
from focus_blocker.snapshot import make_snapshot

from conftest import FakeClock, at
from fakes import FakeProc, FakeProcessTable


def test_productive_scan_terminates_and_notifies_once(logger):
    snapshot = make_snapshot(
        weekdays={"Mon"}, windows=[("09:00", "12:00")], denylist=["chrome.exe"], cooldown_seconds=60
    )
    shown = []
    displayed = threading.Event()

    def display(app_name, message):
        shown.append(app_name)
        displayed.set()

    clock = FakeClock()
    schedule = ScheduleEvaluator(snapshot, logger, now_fn=lambda: at(9, 0), tick_sec=3600)
    gate = NotificationGate(snapshot, MotivationSource(None, logger), display, logger, clock=clock)
    table = FakeProcessTable([FakeProc(42, "CHROME.EXE")])
    enforcer = ProcessEnforcer(snapshot, schedule, gate, logger, processes=table)

    schedule.start()
    try:
        assert len(enforcer.tick()) == 1
        clock.advance(5)
        assert len(enforcer.tick()) == 1
    finally:
        schedule.stop()

    assert table.terminated == [42, 42]
    assert displayed.wait(2)
    assert shown == ["CHROME.EXE"]


def test_disabling_via_update_stops_enforcement(logger):
    snapshot = make_snapshot(weekdays={"Mon"}, windows=[("09:00", "12:00")], denylist=["chrome.exe"])
    schedule = ScheduleEvaluator(snapshot, logger, now_fn=lambda: at(10, 0), tick_sec=3600)
    gate = NotificationGate(snapshot, MotivationSource(None, logger), lambda *_: None, logger)
    table = FakeProcessTable([FakeProc(1, "chrome.exe")])
    enforcer = ProcessEnforcer(snapshot, schedule, gate, logger, processes=table)
    schedule.start()
    try:
        disabled = snapshot.with_changes(enabled=False)
        schedule.update_config(disabled)
        enforcer.update_config(disabled)
        schedule.check()
        assert enforcer.tick() == []
        assert table.list_calls == 0
    finally:
        schedule.stop()

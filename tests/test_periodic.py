import threading
import time

from focus_blocker.periodic import PeriodicTask


def test_ticks_repeatedly_and_stops(logger):
    ticks = []
    task = PeriodicTask("test", 0.01, lambda: ticks.append(1), logger)
    task.start()
    time.sleep(0.2)
    task.stop()
    assert not task.is_running()
    count = len(ticks)
    assert count >= 2
    time.sleep(0.1)
    assert len(ticks) == count


def test_tick_exception_does_not_kill_loop(logger):
    calls = []

    def flaky():
        calls.append(1)
        raise RuntimeError("boom")

    task = PeriodicTask("flaky", 0.01, flaky, logger)
    task.start()
    try:
        time.sleep(0.2)
        assert task.is_running()
    finally:
        task.stop()
    assert len(calls) >= 2


def test_stop_waits_for_running_tick(logger):
    entered = threading.Event()
    finished = []

    def slow():
        entered.set()
        time.sleep(0.2)
        finished.append(1)

    task = PeriodicTask("slow", 0.01, slow, logger)
    task.start()
    assert entered.wait(2)
    task.stop()
    assert finished == [1]


def test_reset_period_takes_effect_without_restart(logger):
    ticked = threading.Event()
    task = PeriodicTask("reset", 3600, ticked.set, logger)
    task.start()
    try:
        task.reset_period(0.05)
        assert task.interval == 0.05
        assert ticked.wait(2)
    finally:
        task.stop()


def test_start_is_idempotent(logger):
    task = PeriodicTask("twice", 3600, lambda: None, logger)
    task.start()
    first = task._thread
    task.start()
    try:
        assert task._thread is first
    finally:
        task.stop()


def test_frequent_resets_do_not_starve_ticks(logger):
    ticked = threading.Event()
    task = PeriodicTask("busy-reset", 0.1, ticked.set, logger)
    task.start()
    try:
        deadline = time.monotonic() + 1.0
        flip = False
        while time.monotonic() < deadline and not ticked.is_set():
            task.reset_period(0.1 if flip else 0.1001)
            flip = not flip
            time.sleep(0.02)
        assert ticked.is_set()
    finally:
        task.stop()

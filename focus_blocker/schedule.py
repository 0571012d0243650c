import datetime
import logging
import threading
from dataclasses import dataclass
from typing import Callable

from .config import SCHEDULE_TICK_SEC
from .periodic import PeriodicTask
from .snapshot import ConfigSnapshot, SnapshotHolder
from .utils import clock_str, minutes_since_midnight, parse_hhmm, weekday_name


def evaluate(snapshot: ConfigSnapshot, now: datetime.datetime) -> bool:
    """Return True if ``now`` falls in productive time for ``snapshot``.

    Windows are inclusive on both ends and never wrap past midnight.
    Malformed windows are ignored.
    """
    if not snapshot.enabled:
        return False

    if weekday_name(now) not in snapshot.active_weekdays:
        return False

    now_minutes = minutes_since_midnight(now)
    for window in snapshot.time_windows:
        start = parse_hhmm(window.start)
        end = parse_hhmm(window.end)
        if start is None or end is None:
            continue
        if start <= now_minutes <= end:
            return True

    return False


@dataclass(frozen=True)
class ScheduleState:
    is_productive: bool = False
    last_transition_at: datetime.datetime | None = None


class ScheduleEvaluator:
    def __init__(
        self,
        snapshot: ConfigSnapshot,
        logger: logging.Logger,
        now_fn: Callable[[], datetime.datetime] = datetime.datetime.now,
        tick_sec: float = SCHEDULE_TICK_SEC,
    ):
        self._config = SnapshotHolder(snapshot)
        self._logger = logger
        self._now_fn = now_fn

        self._check_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._state = ScheduleState()

        self._observers_lock = threading.Lock()
        self._observers: list[Callable[[bool], None]] = []

        self._task = PeriodicTask("schedule-evaluator", tick_sec, self.check, logger)

    def start(self) -> None:
        with self._check_lock:
            now = self._now_fn()
            productive = evaluate(self._config.get(), now)
            with self._state_lock:
                self._state = ScheduleState(productive, now)

        if productive:
            self._logger.info(f"Starting in productive time (current: {clock_str(now)}) - blocking active")
        else:
            self._logger.info(f"Starting outside productive time (current: {clock_str(now)}) - blocking idle")

        self._task.start()
        self._logger.info(f"Scheduler started with {self._task.interval:g}s check interval")

    def stop(self) -> None:
        self._task.stop()
        self._logger.info("Scheduler stopped")

    def check(self) -> bool:
        # Read, evaluate and store as one step so a stale result never lands last
        with self._check_lock:
            snapshot = self._config.get()
            now = self._now_fn()
            productive = evaluate(snapshot, now)

            with self._state_lock:
                changed = productive != self._state.is_productive
                if changed:
                    self._state = ScheduleState(productive, now)

        if changed:
            if productive:
                self._logger.info(f"Entered productive time at {clock_str(now)} - blocking now active")
            else:
                self._logger.info(f"Left productive time at {clock_str(now)} - blocking now idle")
            self._notify(productive)

        return productive

    def is_productive(self) -> bool:
        with self._state_lock:
            return self._state.is_productive

    @property
    def state(self) -> ScheduleState:
        with self._state_lock:
            return self._state

    def on_status_change(self, callback: Callable[[bool], None]) -> None:
        with self._observers_lock:
            self._observers.append(callback)

    def update_config(self, snapshot: ConfigSnapshot) -> None:
        self._config.swap(snapshot)
        self._logger.info("Scheduler config updated")

    def _notify(self, productive: bool) -> None:
        with self._observers_lock:
            observers = list(self._observers)
        for callback in observers:
            try:
                callback(productive)
            except Exception:
                self._logger.exception("Status change observer failed")

import logging
import threading
import time
from typing import Callable

from .config import STOP_JOIN_TIMEOUT_SEC


class PeriodicTask:
    """Runs ``func`` on a daemon thread every ``interval_sec`` seconds.

    The stop flag is only checked between ticks, so a running tick always
    completes. ``reset_period`` applies the new period counted from the
    start of the last tick.
    """

    def __init__(self, name: str, interval_sec: float, func: Callable[[], object], logger: logging.Logger):
        self._name = name
        self._func = func
        self._logger = logger

        self._lock = threading.Lock()
        self._interval = float(interval_sec)
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread = None

    @property
    def interval(self) -> float:
        with self._lock:
            return self._interval

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running():
            return
        self._stop_event.clear()
        self._wake_event.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = STOP_JOIN_TIMEOUT_SEC) -> None:
        self._stop_event.set()
        self._wake_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def reset_period(self, interval_sec: float) -> None:
        with self._lock:
            if float(interval_sec) == self._interval:
                return
            self._interval = float(interval_sec)
        self._wake_event.set()

    def _run(self) -> None:
        last_tick = time.monotonic()
        while not self._stop_event.is_set():
            remaining = last_tick + self.interval - time.monotonic()
            if remaining > 0:
                woken = self._wake_event.wait(remaining)
                if self._stop_event.is_set():
                    break
                if woken:
                    self._wake_event.clear()
                    continue

            last_tick = time.monotonic()
            try:
                self._func()
            except Exception:
                self._logger.exception(f"{self._name} tick failed")

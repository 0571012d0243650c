import datetime
import logging
from dataclasses import dataclass
from typing import Callable

from .periodic import PeriodicTask
from .process_monitor import ProcessTable, is_denied, safe_process_name
from .snapshot import ConfigSnapshot, SnapshotHolder


@dataclass(frozen=True)
class BlockEvent:
    process_name: str
    pid: int
    detected_at: datetime.datetime


class ProcessEnforcer:
    """Kills denylisted processes while the schedule reports productive time.

    ``schedule`` needs ``is_productive()``; ``gate`` needs ``request(event)``
    and ``update_config(snapshot)``.
    """

    def __init__(
        self,
        snapshot: ConfigSnapshot,
        schedule,
        gate,
        logger: logging.Logger,
        processes=None,
        now_fn: Callable[[], datetime.datetime] = datetime.datetime.now,
    ):
        self._config = SnapshotHolder(snapshot)
        self._schedule = schedule
        self._gate = gate
        self._logger = logger
        self._processes = processes if processes is not None else ProcessTable()
        self._now_fn = now_fn

        self._task = PeriodicTask(
            "process-enforcer", snapshot.scan_interval_seconds, self.tick, logger
        )

    @property
    def scan_interval(self) -> float:
        return self._task.interval

    def start(self) -> None:
        self._task.start()
        self._logger.info(f"Blocker started with scan interval: {self._task.interval:g} seconds")

    def stop(self) -> None:
        self._task.stop()
        self._logger.info("Blocker stopped")

    def tick(self) -> list[BlockEvent]:
        if not self._schedule.is_productive():
            return []

        snapshot = self._config.get()

        try:
            processes = self._processes.list_processes()
        except Exception as e:
            self._logger.error(f"Failed to get processes: {e}")
            return []

        events: list[BlockEvent] = []
        for proc in processes:
            name = safe_process_name(proc)
            if not is_denied(name, snapshot.denylist):
                continue
            if not self._terminate(proc, name):
                continue

            event = BlockEvent(process_name=name, pid=proc.pid, detected_at=self._now_fn())
            self._logger.info(f"Blocked: terminated process {name} (PID: {proc.pid})")
            events.append(event)
            self._gate.request(event)

        if not events:
            self._logger.debug("Scan complete - no blocked apps found")
        return events

    def update_config(self, snapshot: ConfigSnapshot) -> None:
        self._config.swap(snapshot)
        self._gate.update_config(snapshot)
        if snapshot.scan_interval_seconds != self._task.interval:
            self._task.reset_period(snapshot.scan_interval_seconds)
            self._logger.info(f"Blocker scan interval updated to {snapshot.scan_interval_seconds} seconds")

    def _terminate(self, proc, name: str) -> bool:
        try:
            self._processes.terminate(proc)
            return True
        except Exception as e:
            self._logger.warning(f"Terminate failed for {name} (PID: {proc.pid}): {e}, trying kill")

        try:
            self._processes.kill(proc)
            return True
        except Exception as e:
            self._logger.error(f"Failed to kill process {name} (PID: {proc.pid}): {e}")
            return False

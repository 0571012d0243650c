import logging
import threading
import time
from typing import Callable

from .enforcer import BlockEvent
from .messages import MotivationSource
from .snapshot import ConfigSnapshot, SnapshotHolder


class NotificationGate:
    """Debounces block notifications to one per cooldown window.

    Fired notifications fetch a message and display it on a detached thread,
    so a slow provider or a modal popup never delays the caller.
    """

    def __init__(
        self,
        snapshot: ConfigSnapshot,
        messages: MotivationSource,
        display: Callable[[str, str], None],
        logger: logging.Logger,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._config = SnapshotHolder(snapshot)
        self._messages = messages
        self._display = display
        self._logger = logger
        self._clock = clock

        self._lock = threading.Lock()
        self._last_fired_at: float | None = None

    def update_config(self, snapshot: ConfigSnapshot) -> None:
        self._config.swap(snapshot)

    def request(self, event: BlockEvent) -> bool:
        snapshot = self._config.get()
        now = self._clock()

        with self._lock:
            if self._last_fired_at is not None and now - self._last_fired_at < snapshot.notification_cooldown_seconds:
                return False
            self._last_fired_at = now

        threading.Thread(
            target=self._dispatch,
            args=(event, snapshot),
            name=f"notify-{event.process_name}",
            daemon=True,
        ).start()
        return True

    def _dispatch(self, event: BlockEvent, snapshot: ConfigSnapshot) -> None:
        if snapshot.ai.enabled:
            message = self._messages.get(event.process_name, snapshot.ai.personality)
        else:
            message = self._messages.default_message

        try:
            self._display(event.process_name, message)
        except Exception as e:
            self._logger.error(f"Failed to show popup: {e}")

import threading
from dataclasses import dataclass, field, replace
from typing import Iterable, Protocol

from .config import (
    DEFAULT_ACTIVE_DAYS,
    DEFAULT_BLOCKLIST,
    DEFAULT_COOLDOWN_SEC,
    DEFAULT_MODEL,
    DEFAULT_SCAN_INTERVAL_SEC,
    DEFAULT_TIME_WINDOWS,
)


@dataclass(frozen=True)
class TimeWindow:
    start: str
    end: str


@dataclass(frozen=True)
class AISettings:
    enabled: bool = True
    personality: str = ""
    model: str = DEFAULT_MODEL


@dataclass(frozen=True)
class ConfigSnapshot:
    """Immutable view of the blocking policy.

    Never mutated after construction; use ``with_changes`` to derive a new one.
    """

    enabled: bool = False
    active_weekdays: frozenset[str] = frozenset()
    time_windows: tuple[TimeWindow, ...] = ()
    denylist: frozenset[str] = frozenset()
    scan_interval_seconds: int = DEFAULT_SCAN_INTERVAL_SEC
    notification_cooldown_seconds: int = DEFAULT_COOLDOWN_SEC
    ai: AISettings = field(default_factory=AISettings)
    autostart: bool = True
    first_run_completed: bool = False

    def __post_init__(self):
        object.__setattr__(self, "active_weekdays", frozenset(self.active_weekdays))
        object.__setattr__(self, "time_windows", tuple(self.time_windows))
        object.__setattr__(
            self, "denylist", frozenset(name.strip().lower() for name in self.denylist if name.strip())
        )

    def with_changes(self, **changes) -> "ConfigSnapshot":
        return replace(self, **changes)


def default_snapshot() -> ConfigSnapshot:
    return ConfigSnapshot(
        enabled=False,
        active_weekdays=frozenset(DEFAULT_ACTIVE_DAYS),
        time_windows=tuple(TimeWindow(s, e) for s, e in DEFAULT_TIME_WINDOWS),
        denylist=frozenset(DEFAULT_BLOCKLIST),
    )


def make_snapshot(
    *,
    enabled: bool = True,
    weekdays: Iterable[str] = (),
    windows: Iterable[tuple[str, str]] = (),
    denylist: Iterable[str] = (),
    scan_interval_seconds: int = DEFAULT_SCAN_INTERVAL_SEC,
    cooldown_seconds: int = DEFAULT_COOLDOWN_SEC,
    ai: AISettings | None = None,
) -> ConfigSnapshot:
    return ConfigSnapshot(
        enabled=enabled,
        active_weekdays=frozenset(weekdays),
        time_windows=tuple(TimeWindow(s, e) for s, e in windows),
        denylist=frozenset(denylist),
        scan_interval_seconds=scan_interval_seconds,
        notification_cooldown_seconds=cooldown_seconds,
        ai=ai or AISettings(),
    )


class SnapshotHolder:
    """Lock-guarded reference to the current snapshot."""

    def __init__(self, snapshot: ConfigSnapshot):
        self._lock = threading.Lock()
        self._snapshot = snapshot

    def get(self) -> ConfigSnapshot:
        with self._lock:
            return self._snapshot

    def swap(self, snapshot: ConfigSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot


class ConfigUpdater(Protocol):
    def update_config(self, snapshot: ConfigSnapshot) -> None:
        ...

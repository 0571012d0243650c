import os
import json
import threading

from .config import DEFAULT_MODEL
from .snapshot import AISettings, ConfigSnapshot, TimeWindow, default_snapshot
from .utils import WEEKDAYS, ensure_dir, parse_hhmm


class ConfigError(ValueError):
    pass


def snapshot_to_dict(snapshot: ConfigSnapshot) -> dict:
    return {
        "enabled": snapshot.enabled,
        "autostart": snapshot.autostart,
        "scan_interval_seconds": snapshot.scan_interval_seconds,
        "popup_cooldown_seconds": snapshot.notification_cooldown_seconds,
        "active_days": [d for d in WEEKDAYS if d in snapshot.active_weekdays],
        "time_windows": [{"start": w.start, "end": w.end} for w in snapshot.time_windows],
        "blocklist": sorted(snapshot.denylist),
        "ai": {
            "enabled": snapshot.ai.enabled,
            "personality": snapshot.ai.personality,
            "model": snapshot.ai.model,
        },
        "first_run_completed": snapshot.first_run_completed,
    }


def _require(data: dict, key: str, kind: type, default):
    value = data.get(key, default)
    # bool is an int subclass, keep them apart
    if kind is int and isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    if not isinstance(value, kind):
        raise ConfigError(f"{key} must be of type {kind.__name__}")
    return value


def snapshot_from_dict(data: dict) -> ConfigSnapshot:
    """Build a snapshot from the on-disk layout, rejecting malformed input.

    Missing keys take their defaults. Time windows are kept as written; the
    schedule skips any that do not parse.
    """
    if not isinstance(data, dict):
        raise ConfigError("config root must be an object")
    defaults = default_snapshot()

    scan = _require(data, "scan_interval_seconds", int, defaults.scan_interval_seconds)
    if scan < 1:
        raise ConfigError("scan_interval_seconds must be >= 1")
    cooldown = _require(data, "popup_cooldown_seconds", int, defaults.notification_cooldown_seconds)
    if cooldown < 0:
        raise ConfigError("popup_cooldown_seconds must be >= 0")

    days = _require(data, "active_days", list, sorted(defaults.active_weekdays))
    for day in days:
        if day not in WEEKDAYS:
            raise ConfigError(f"unknown weekday: {day!r}")

    windows = []
    for raw in _require(data, "time_windows", list, []):
        if not isinstance(raw, dict):
            raise ConfigError("time_windows entries must be objects")
        windows.append(TimeWindow(str(raw.get("start", "")), str(raw.get("end", ""))))

    blocklist = _require(data, "blocklist", list, sorted(defaults.denylist))
    if not all(isinstance(name, str) for name in blocklist):
        raise ConfigError("blocklist entries must be strings")

    ai_raw = _require(data, "ai", dict, {})
    ai = AISettings(
        enabled=_require(ai_raw, "enabled", bool, True),
        personality=_require(ai_raw, "personality", str, ""),
        model=_require(ai_raw, "model", str, DEFAULT_MODEL) or DEFAULT_MODEL,
    )

    return ConfigSnapshot(
        enabled=_require(data, "enabled", bool, defaults.enabled),
        active_weekdays=frozenset(days),
        time_windows=tuple(windows),
        denylist=frozenset(blocklist),
        scan_interval_seconds=scan,
        notification_cooldown_seconds=cooldown,
        ai=ai,
        autostart=_require(data, "autostart", bool, defaults.autostart),
        first_run_completed=_require(data, "first_run_completed", bool, defaults.first_run_completed),
    )


def malformed_windows(snapshot: ConfigSnapshot) -> list[TimeWindow]:
    return [w for w in snapshot.time_windows if parse_hhmm(w.start) is None or parse_hhmm(w.end) is None]


class ConfigStore:
    """JSON-backed source of snapshots. The engine only ever reads from it."""

    def __init__(self, path: str):
        self._path = path
        self._lock = threading.Lock()
        self._snapshot = default_snapshot()

    @property
    def path(self) -> str:
        return self._path

    def get(self) -> ConfigSnapshot:
        with self._lock:
            return self._snapshot

    def load(self) -> ConfigSnapshot:
        ensure_dir(os.path.dirname(self._path))
        if not os.path.exists(self._path):
            snapshot = default_snapshot()
            self.save(snapshot)
            return snapshot

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"failed to read config: {e}") from e

        snapshot = snapshot_from_dict(data)
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def save(self, snapshot: ConfigSnapshot) -> None:
        ensure_dir(os.path.dirname(self._path))
        data = snapshot_to_dict(snapshot)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        with self._lock:
            self._snapshot = snapshot

    def toggle_enabled(self) -> ConfigSnapshot:
        snapshot = self.get()
        snapshot = snapshot.with_changes(enabled=not snapshot.enabled)
        self.save(snapshot)
        return snapshot

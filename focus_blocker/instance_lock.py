import os

import psutil

from .utils import ensure_dir


class AlreadyRunningError(RuntimeError):
    pass


class InstanceLock:
    """Lock file holding the owner's PID; keeps a second daemon from starting.

    A file left behind by a process that no longer exists is taken over.
    """

    def __init__(self, path: str):
        self._path = path
        self._held = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> None:
        ensure_dir(os.path.dirname(self._path))
        for _ in range(2):
            try:
                fd = os.open(self._path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o600)
            except FileExistsError:
                owner = self._read_owner()
                if owner is not None and owner != os.getpid() and psutil.pid_exists(owner):
                    raise AlreadyRunningError(f"another instance is already running (PID {owner})")
                self._remove()
                continue
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(str(os.getpid()))
            self._held = True
            return
        raise AlreadyRunningError(f"could not take lock file {self._path}")

    def release(self) -> None:
        if not self._held:
            return
        self._held = False
        self._remove()

    def _read_owner(self) -> int | None:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                return int(f.read().strip())
        except (OSError, ValueError):
            return None

    def _remove(self) -> None:
        try:
            os.remove(self._path)
        except FileNotFoundError:
            pass

import psutil

from .config import TERMINATE_GRACE_SEC


def safe_process_name(proc) -> str | None:
    try:
        return proc.name()
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return None
    except Exception:
        return None


def is_denied(proc_name: str | None, denylist: frozenset[str]) -> bool:
    """Exact, case-insensitive match. ``denylist`` is already lower case."""
    if not proc_name:
        return False
    return proc_name.lower() in denylist


class ProcessTable:
    """OS process layer backed by psutil. Failures surface as psutil.Error."""

    def __init__(self, grace_sec: float = TERMINATE_GRACE_SEC):
        self._grace_sec = grace_sec

    def list_processes(self) -> list[psutil.Process]:
        return list(psutil.process_iter())

    def terminate(self, proc: psutil.Process) -> None:
        proc.terminate()
        # TimeoutExpired here escalates to kill()
        proc.wait(timeout=self._grace_sec)

    def kill(self, proc: psutil.Process) -> None:
        proc.kill()

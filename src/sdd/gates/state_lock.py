"""Project-scoped file lock held for one load-mutate-save unit. No nested locks."""

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from sdd.gates.errors import StateLockedError
from sdd.gates.paths import get_lock_path


@contextmanager
def state_lock(project_root: Path, *, timeout: float = -1) -> Generator[None, None, None]:
    """Acquire the project state lock (.sdd/.lock).

    Never acquire any other lock while holding the state lock.

    Args:
        project_root: Project root (lock file is .sdd/.lock under it).
        timeout: Seconds to wait; negative waits forever.

    Yields:
        None; lock is held for the context body.

    Raises:
        StateLockedError: If the lock is not acquired within ``timeout``.
    """
    lock_path = get_lock_path(project_root)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    flock = FileLock(str(lock_path))
    try:
        flock.acquire(timeout=timeout)
    except Timeout as exc:
        raise StateLockedError(str(lock_path), timeout) from exc
    try:
        yield
    finally:
        flock.release()

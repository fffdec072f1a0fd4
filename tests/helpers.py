"""Shared test helpers."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

START = datetime(2026, 1, 14, 10, 30, tzinfo=UTC)


def ticking_clock(
    start: datetime = START, step: timedelta = timedelta(seconds=1)
) -> Callable[[], datetime]:
    """Return a clock advancing by ``step`` on every call, first call ``start``."""
    current = [start - step]

    def _now() -> datetime:
        current[0] = current[0] + step
        return current[0]

    return _now

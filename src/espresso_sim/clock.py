"""
Time sources for the service loop.

The scheduler only needs ``now()`` and ``sleep()``. ``SystemClock`` is the
real-time clock used by the CLI; ``ManualClock`` is a deterministic clock where
sleeping simply advances time, so simulated runs finish instantly.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic non-decreasing time source (seconds)."""

    def now(self) -> float:
        ...

    def sleep(self, seconds: float) -> None:
        ...


class SystemClock:
    """
    Real-time clock using ``time.monotonic()`` and ``time.sleep()``.

    Readings are not epoch timestamps. Windows must be built relative to
    ``now()`` of the same clock, as ``generate_population`` does.
    """

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def __repr__(self) -> str:
        return "SystemClock()"


class ManualClock:
    """
    Deterministic clock for tests and benchmarks.

    Example:
        >>> clock = ManualClock(start=100.0)
        >>> clock.sleep(0.5)
        >>> clock.now()
        100.5
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def sleep(self, seconds: float) -> None:
        self.advance(seconds)

    def advance(self, seconds: float) -> None:
        """
        Move time forward.

        Raises:
            ValueError: If seconds is negative (time never goes backwards)
        """
        if not seconds >= 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")
        self._now += seconds

    def __repr__(self) -> str:
        return f"ManualClock(now={self._now})"

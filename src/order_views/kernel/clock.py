"""Kernel clock – epoch-millisecond clock port + implementations."""
from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Port: source of wall-clock time in epoch milliseconds."""

    def now_ms(self) -> int: ...


class SystemClock:
    """Production clock backed by ``time.time_ns``."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000


class FrozenClock:
    """Test clock pinned to a fixed epoch-millisecond value."""

    def __init__(self, fixed_ms: int) -> None:
        self._fixed_ms = fixed_ms

    def now_ms(self) -> int:
        return self._fixed_ms

    def advance(self, ms: int) -> None:
        self._fixed_ms += ms


SYSTEM_CLOCK = SystemClock()


def now_ms() -> int:
    """Shorthand for the current epoch time in milliseconds."""
    return SYSTEM_CLOCK.now_ms()


__all__ = ["Clock", "FrozenClock", "SYSTEM_CLOCK", "SystemClock", "now_ms"]

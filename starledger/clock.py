"""
clock.py - Time sources for the chain and the ownership workflow

Provides the wall-clock reading used to timestamp blocks and age challenges.

Classes:
- Clock: Protocol defining the time interface
- SystemClock: Current wall-clock time
- ManualClock: Settable time for tests and simulations

All times are integer seconds since the Unix epoch.
"""

import time
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """
    Protocol for time sources.

    Implementations must provide now(), returning whole Unix seconds.
    """

    def now(self) -> int:
        """Return the current time in whole seconds since the epoch."""
        ...


class SystemClock:
    """Clock reading the system wall clock, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())

    def __repr__(self):
        return "SystemClock()"


class ManualClock:
    """
    Clock whose time only moves when told to.

    Example:
        clock = ManualClock(1_700_000_000)
        chain = Chain("test", clock=clock, verbose=False)
        clock.advance(301)
    """

    def __init__(self, start: Optional[int] = None):
        """
        Initialize the clock.

        Args:
            start: Initial time in Unix seconds (default: current wall-clock time)
        """
        self._now = int(time.time()) if start is None else int(start)

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        """Jump to an absolute time. Moving backwards is allowed."""
        self._now = int(timestamp)

    def advance(self, seconds: int) -> int:
        """
        Move the clock forward.

        Returns:
            The new current time

        Raises:
            ValueError: If seconds is negative
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance clock by negative amount: {seconds}")
        self._now += int(seconds)
        return self._now

    def __repr__(self):
        return f"ManualClock({self._now})"

"""Injectable millisecond clocks.

The engine never reads the system time directly; it asks a ``Clock`` for
"now" in epoch milliseconds. Production code uses :class:`SystemClock`;
tests and the CLI replay use :class:`ManualClock` to control elapsed time
deterministically instead of sleeping.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current time in epoch milliseconds."""

    def now_ms(self) -> int: ...


class SystemClock:
    """Wall-clock time from :func:`time.time`."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock:
    """A clock that only moves when told to.

    Parameters
    ----------
    start_ms : int
        Initial reading. Defaults to a fixed, non-zero instant so that the
        first update after construction is never rate-limited.
    """

    __slots__ = ("_now",)

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        """Move forward by ``ms`` and return the new reading."""
        if ms < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += ms
        return self._now

    def set(self, ms: int) -> None:
        """Jump to an absolute reading."""
        self._now = ms


def iso_timestamp(ms: int) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (UTC)."""
    seconds, millis = divmod(int(ms), 1000)
    dt = datetime.fromtimestamp(seconds, tz=UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}Z"


__all__ = ["Clock", "ManualClock", "SystemClock", "iso_timestamp"]

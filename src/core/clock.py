"""Wall-clock access and the display formats the client understands.

``calendar_day`` and ``clock_time`` produce the same strings a browser
produces with ``Date.toDateString()`` and
``toLocaleTimeString('en-US', {hour: '2-digit', minute: '2-digit'})``,
so records written by either side compare equal.
"""

from datetime import datetime, tzinfo
from typing import Protocol

from core.config import settings


class Clock(Protocol):
    """Source of the current moment."""

    def now(self) -> datetime:
        """Return the current, timezone-aware moment."""
        ...


class SystemClock:
    """Clock backed by the host time, expressed in a display timezone."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz or settings.display_tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


def in_offset_of(moment: datetime, reference: datetime | None) -> datetime:
    """Express ``moment`` in the UTC offset carried by ``reference``, if it has one."""
    if reference is None or reference.tzinfo is None:
        return moment
    return moment.astimezone(reference.tzinfo)


def calendar_day(moment: datetime) -> str:
    """Format a moment as e.g. ``Mon Jan 01 2024``."""
    return moment.strftime("%a %b %d %Y")


def clock_time(moment: datetime) -> str:
    """Format a moment as e.g. ``09:05 PM``."""
    return moment.strftime("%I:%M %p")


def display_time(moment: datetime) -> str:
    """Format the dashboard clock, e.g. ``Sunday, October 18, 2026 at 07:32 PM``."""
    return f"{moment:%A, %B} {moment.day}, {moment.year} at {clock_time(moment)}"


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)

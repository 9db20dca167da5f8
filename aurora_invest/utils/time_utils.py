"""
Time utilities.

The engines never read the wall clock directly: ``analyze_stock`` stamps
``generated_at`` from an injected ``Clock``. Production code uses
``SystemClock``; tests pin time with ``FixedClock`` so results compare equal.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything with a ``now()`` returning a timezone-aware datetime."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the real UTC wall clock."""

    def now(self) -> datetime:
        return utcnow()


class FixedClock:
    """Clock that always returns the same instant.

    Naive datetimes are interpreted as UTC.
    """

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)

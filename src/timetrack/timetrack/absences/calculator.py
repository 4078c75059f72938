from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import HalfDayPart


def absence_days(
    start: date,
    end: date,
    *,
    half_day: bool = False,
    start_half_day: Optional[HalfDayPart] = None,
    end_half_day: Optional[HalfDayPart] = None,
) -> float:
    """Length of an absence in (possibly half) calendar days, never below 0.5.

    Starting in the afternoon skips the first morning; ending in the morning
    skips the last afternoon.
    """
    if half_day:
        return 0.5

    days = float((end - start).days + 1)
    if start_half_day == HalfDayPart.AFTERNOON:
        days -= 0.5
    if end_half_day == HalfDayPart.MORNING:
        days -= 0.5
    return max(days, 0.5)

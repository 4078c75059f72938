from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ...common.datetime_utils import minutes_between
from ...core.constants import STANDARD_WORKDAY_MINUTES
from ...core.enums import TimeEntryType
from ..model import TimeEntry, WorkSession
from .base import WorkTimeCalculator

_WORK_STARTS = (TimeEntryType.IN, TimeEntryType.RESUME)
_WORK_STOPS = (TimeEntryType.BREAK, TimeEntryType.OUT)


def _ordered(entries: Sequence[TimeEntry]) -> list[TimeEntry]:
    return sorted(entries, key=lambda e: (e.timestamp, e.entry_id))


class StandardWorkTimeCalculator(WorkTimeCalculator):
    """Standard rule: work runs IN/RESUME -> BREAK/OUT, breaks BREAK -> RESUME.

    Entries passed in must belong to a single employee. A second IN while a
    session is open restarts it; an OUT without an open session is ignored.
    """

    def __init__(self, *, standard_day_minutes: int = STANDARD_WORKDAY_MINUTES):
        self._standard_day_minutes = int(standard_day_minutes)

    def sessions(self, entries: Sequence[TimeEntry]) -> list[WorkSession]:
        out: list[WorkSession] = []
        opening: Optional[TimeEntry] = None
        break_started: Optional[datetime] = None
        breaks = 0.0

        for e in _ordered(entries):
            if e.entry_type == TimeEntryType.IN:
                opening, break_started, breaks = e, None, 0.0
            elif opening is None:
                continue
            elif e.entry_type == TimeEntryType.BREAK:
                if break_started is None:
                    break_started = e.timestamp
            elif e.entry_type == TimeEntryType.RESUME:
                if break_started is not None:
                    breaks += minutes_between(break_started, e.timestamp)
                    break_started = None
            elif e.entry_type == TimeEntryType.OUT:
                if break_started is not None:
                    breaks += minutes_between(break_started, e.timestamp)
                out.append(
                    WorkSession(
                        employee_id=opening.employee_id,
                        start=opening.timestamp,
                        end=e.timestamp,
                        break_minutes=breaks,
                        opening_entry=opening,
                    )
                )
                opening, break_started, breaks = None, None, 0.0

        return out

    def worked_minutes(self, entries: Sequence[TimeEntry], *, until: Optional[datetime] = None) -> float:
        total = 0.0
        started: Optional[datetime] = None
        for e in _ordered(entries):
            if e.entry_type == TimeEntryType.IN or (e.entry_type == TimeEntryType.RESUME and started is None):
                started = e.timestamp
            elif e.entry_type in _WORK_STOPS and started is not None:
                total += minutes_between(started, e.timestamp)
                started = None

        if started is not None and until is not None:
            total += minutes_between(started, until)
        return total

    def break_minutes(self, entries: Sequence[TimeEntry], *, day_end: Optional[datetime] = None) -> float:
        total = 0.0
        started: Optional[datetime] = None
        for e in _ordered(entries):
            if e.entry_type == TimeEntryType.BREAK:
                if started is None:
                    started = e.timestamp
            elif e.entry_type in (TimeEntryType.RESUME, TimeEntryType.OUT) and started is not None:
                total += minutes_between(started, e.timestamp)
                started = None

        # An unfinished break runs until the end of its day.
        if started is not None and day_end is not None:
            total += minutes_between(started, day_end)
        return total

    def overtime_minutes(self, worked_minutes: float) -> float:
        return max(worked_minutes - self._standard_day_minutes, 0.0)

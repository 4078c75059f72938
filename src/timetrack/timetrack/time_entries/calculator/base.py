from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from ..model import TimeEntry, WorkSession


class WorkTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for work time)."""

    @abstractmethod
    def sessions(self, entries: Sequence[TimeEntry]) -> list[WorkSession]:
        raise NotImplementedError

    @abstractmethod
    def worked_minutes(self, entries: Sequence[TimeEntry], *, until: Optional[datetime] = None) -> float:
        raise NotImplementedError

    @abstractmethod
    def break_minutes(self, entries: Sequence[TimeEntry], *, day_end: Optional[datetime] = None) -> float:
        raise NotImplementedError

    @abstractmethod
    def overtime_minutes(self, worked_minutes: float) -> float:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.constants import NIGHT_SHIFT_EVENING_HOUR, NIGHT_SHIFT_MORNING_HOUR
from .strategies.base import DayShiftStrategy, ShiftMatchStrategy
from .strategies.early_morning_strategy import EarlyMorningStrategy
from .strategies.evening_strategy import EveningStrategy


@dataclass
class ShiftMatchStrategyFactory:
    """Factory Pattern: choose the matching strategy from the local clock-in hour."""

    evening_hour: int = NIGHT_SHIFT_EVENING_HOUR
    morning_hour: int = NIGHT_SHIFT_MORNING_HOUR

    def for_entry(self, *, local_ts: datetime) -> ShiftMatchStrategy:
        if local_ts.hour >= self.evening_hour:
            return EveningStrategy()
        if local_ts.hour < self.morning_hour:
            return EarlyMorningStrategy()
        return DayShiftStrategy()

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_MAX_CARRY_OVER_DAYS, DEFAULT_MIN_NOTICE_DAYS, DEFAULT_VACATION_DAYS


@dataclass(frozen=True)
class VacationPolicy:
    policy_id: int
    company_id: int
    name: str
    yearly_days: float = DEFAULT_VACATION_DAYS
    max_carry_over_days: float = DEFAULT_MAX_CARRY_OVER_DAYS
    min_notice_days: int = DEFAULT_MIN_NOTICE_DAYS
    allow_half_days: bool = True
    active: bool = True


@dataclass(frozen=True)
class VacationBalance:
    balance_id: int
    company_id: int
    employee_id: int
    policy_id: Optional[int]
    year: int
    total_days: float = 0.0
    used_days: float = 0.0
    pending_days: float = 0.0
    adjusted_days: float = 0.0
    carried_over_days: float = 0.0

    @property
    def available_days(self) -> float:
        return self.total_days + self.adjusted_days - self.used_days - self.pending_days

    @property
    def remaining_after_use(self) -> float:
        """What could be carried into next year: total minus what was actually taken."""
        return self.total_days - self.used_days

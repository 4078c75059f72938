from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import VacationBalance, VacationPolicy


class VacationRepository(Protocol):
    def list_policies(self, company_id: int, *, active_only: bool = False) -> Sequence[VacationPolicy]:
        raise NotImplementedError

    def get_policy(self, company_id: int, policy_id: int) -> Optional[VacationPolicy]:
        raise NotImplementedError

    def create_policy(
        self,
        *,
        company_id: int,
        name: str,
        yearly_days: float,
        max_carry_over_days: float,
        min_notice_days: int,
        allow_half_days: bool,
    ) -> int:
        raise NotImplementedError

    def update_policy(self, policy: VacationPolicy) -> bool:
        raise NotImplementedError

    def get_balance(self, company_id: int, employee_id: int, year: int) -> Optional[VacationBalance]:
        raise NotImplementedError

    def create_balance(
        self,
        *,
        company_id: int,
        employee_id: int,
        policy_id: Optional[int],
        year: int,
        total_days: float,
        carried_over_days: float,
    ) -> int:
        raise NotImplementedError

    def update_balance(self, balance: VacationBalance) -> bool:
        raise NotImplementedError
